# 30.09.26

import os
import shutil
import logging
from typing import Optional


# Internal utilities
from FragmentMux.utils import config_manager


# Variable
logger = logging.getLogger(__name__)


def _find_binary(config_key: str, names) -> Optional[str]:
    """Configured path first, then the first executable found on PATH."""
    configured = config_manager.config.get("BINARY", config_key)
    if configured:
        configured = os.path.expanduser(configured)
        if os.path.isfile(configured):
            return configured
        logger.warning(f"Configured {config_key} not found: {configured}")

    for name in names:
        found = shutil.which(name)
        if found:
            return found

    logger.debug(f"No binary found for {config_key}")
    return None


def check_ffmpeg() -> Optional[str]:
    return _find_binary("ffmpeg_path", ["ffmpeg", "ffmpeg.exe"])


def check_mkvmerge() -> Optional[str]:
    return _find_binary("mkvmerge_path", ["mkvmerge", "mkvmerge.exe"])
