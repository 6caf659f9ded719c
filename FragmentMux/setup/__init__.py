# 30.09.26

from .system import get_ffmpeg_path, get_mkvmerge_path

__all__ = [
    "get_ffmpeg_path",
    "get_mkvmerge_path"
]
