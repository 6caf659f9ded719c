# 08.10.26

import logging
from typing import Optional, Sequence


# Internal utilities
from FragmentMux.utils import config_manager


# Logic class
from .capture import run_plan
from .merge import WRITE_DATE, build_merge_command, build_mux_command
from .mkvmerge import build_mkvmerge_command
from .object import MuxFormat, OutputTrack


# Config
logger = logging.getLogger(__name__)
MUX_FORMAT = config_manager.config.get("PROCESS", "mux_format", "mp4")
USE_MKVMERGE = config_manager.config.get_bool("PROCESS", "use_mkvmerge")


def merge_by_ffmpeg(files: Sequence[str], output_path: str, mux_format=MUX_FORMAT, binary: Optional[str] = None, **options) -> bool:
    """
    Join intermediate files with ffmpeg and remux them into ``mux_format``.

    Extra keyword options are forwarded to ``build_merge_command``.
    """
    plan = build_merge_command(files, output_path, mux_format=mux_format, binary=binary, **options)
    return run_plan(plan, description="FFMPEG Merge").success


def mux_inputs_by_ffmpeg(tracks: Sequence[OutputTrack], output_path: str, mux_format=MUX_FORMAT, date_info: bool = WRITE_DATE, binary: Optional[str] = None) -> bool:
    plan = build_mux_command(tracks, output_path, mux_format=mux_format, date_info=date_info, binary=binary)
    return run_plan(plan, description="FFMPEG Mux").success


def mux_inputs_by_mkvmerge(tracks: Sequence[OutputTrack], output_path: str, binary: Optional[str] = None) -> bool:
    plan = build_mkvmerge_command(tracks, output_path, binary=binary)
    return run_plan(plan, description="MKVMERGE Mux").success


def mux_tracks(tracks: Sequence[OutputTrack], output_path: str, mux_format=MUX_FORMAT, use_mkvmerge: bool = USE_MKVMERGE, date_info: bool = WRITE_DATE) -> bool:
    """Mux with mkvmerge when enabled and the target is MKV, otherwise with ffmpeg."""
    mux_format = MuxFormat.parse(mux_format)
    if use_mkvmerge and mux_format == MuxFormat.MKV:
        return mux_inputs_by_mkvmerge(tracks, output_path)

    if use_mkvmerge:
        logger.info(f"mkvmerge only writes MKV, using ffmpeg for {mux_format.value}")
    return mux_inputs_by_ffmpeg(tracks, output_path, mux_format=mux_format, date_info=date_info)
