# 29.09.26

import os
import copy
import json
import logging
from typing import Any, Dict, Optional


# Variable
logger = logging.getLogger(__name__)
CONFIG_ENV = "FRAGMENTMUX_CONFIG"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "DEFAULT": {
        "debug": False,
        "log_to_file": False,
        "log_file": "fragmentmux.log",
    },
    "BINARY": {
        "ffmpeg_path": "",
        "mkvmerge_path": "",
    },
    "MERGE": {
        "partial_threshold": 90000,
        "small_batch_size": 100,
        "large_batch_size": 200,
        "partial_merge_min_files": 1800,
        "intermediate_prefix": "T",
        "intermediate_extension": ".ts",
    },
    "PROCESS": {
        "mux_format": "mp4",
        "use_concat_demuxer": False,
        "use_aac_filter": True,
        "fast_start": False,
        "write_date": True,
        "use_mkvmerge": False,
        "encoding_tool": "",
    },
}


class ConfigSections(dict):
    """Dict of sections with typed lookups, e.g. ``get_bool('PROCESS', 'fast_start')``."""

    def get(self, section: str, key: Optional[str] = None, default: Any = None) -> Any:
        if key is None:
            return super().get(section, default)

        values = super().get(section)
        if not isinstance(values, dict):
            return default
        return values.get(key, default)

    def get_bool(self, section: str, key: str, default: bool = False) -> bool:
        value = self.get(section, key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    def get_int(self, section: str, key: str, default: int = 0) -> int:
        value = self.get(section, key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer for {section}.{key}: {value!r}, using {default}")
            return default


class ConfigManager:
    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path or os.environ.get(CONFIG_ENV) or os.path.join(os.getcwd(), CONFIG_FILENAME)
        self.config = ConfigSections()
        self.load()

    def load(self) -> None:
        """Reset to the built-in defaults, then overlay the user file key by key."""
        self.config.clear()
        self.config.update(copy.deepcopy(DEFAULT_CONFIG))

        if not os.path.isfile(self.file_path):
            logger.debug(f"No config file at {self.file_path}, using defaults")
            return

        with open(self.file_path, 'r', encoding='utf-8') as f:
            user_config = json.load(f)

        for section, values in user_config.items():
            if isinstance(values, dict):
                self.config.setdefault(section, {}).update(values)
            else:
                self.config[section] = values

        logger.info(f"Loaded config from {self.file_path}")

    def get(self, section: str, key: str, default: Any = None) -> Any:
        return self.config.get(section, key, default)

    def get_bool(self, section: str, key: str, default: bool = False) -> bool:
        return self.config.get_bool(section, key, default)

    def get_int(self, section: str, key: str, default: int = 0) -> int:
        return self.config.get_int(section, key, default)


config_manager = ConfigManager()
