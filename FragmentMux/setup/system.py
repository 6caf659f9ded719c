# 30.09.26

# Logic
from .checker import check_ffmpeg, check_mkvmerge


# Variable
ffmpeg_path = check_ffmpeg()
mkvmerge_path = check_mkvmerge()


def get_ffmpeg_path() -> str:
    return ffmpeg_path or "ffmpeg"

def get_mkvmerge_path() -> str:
    return mkvmerge_path or "mkvmerge"
