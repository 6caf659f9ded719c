# 06.10.26

import os
from typing import Callable, List, Optional, Sequence


# Internal utilities
from FragmentMux.setup import get_mkvmerge_path
from FragmentMux.utils.trans_language import convert_lang_code_and_display_name


# Logic class
from .exceptions import MissingInputError
from .object import MediaType, OutputTrack, MuxPlan


def _tokens_for_track(track: OutputTrack, default_flag: Optional[bool]) -> List[str]:
    toks = ['--language', f'0:{track.language or "und"}']
    if default_flag is False:
        toks += ['--default-track', '0:no']
    if track.description:
        toks += ['--track-name', f'0:{track.description}']
    toks.append(track.path)
    return toks


def build_mkvmerge_command(
    tracks: Sequence[OutputTrack],
    output_path: str,
    lang_resolver: Callable[[OutputTrack], OutputTrack] = convert_lang_code_and_display_name,
    binary: Optional[str] = None,
) -> MuxPlan:
    """
    Build the mkvmerge invocation for the finished tracks.

    Every flag is grouped in front of the input it applies to. Chapters are
    dropped, subtitles and every audio track after the first are not default.
    """
    if not tracks:
        raise ValueError("No tracks to mux")
    for track in tracks:
        if not os.path.exists(track.path):
            raise MissingInputError(track.path)

    output = os.path.abspath(output_path) + ".mkv"
    inputs = []
    seen_audio = False

    for track in tracks:
        track = lang_resolver(track)

        default_flag = None
        if track.media_type == MediaType.SUBTITLES:
            default_flag = False
        elif track.media_type == MediaType.AUDIO:
            default_flag = False if seen_audio else None
            seen_audio = True

        inputs.append(tuple(_tokens_for_track(track, default_flag)))

    return MuxPlan(
        binary=binary or get_mkvmerge_path(),
        output_path=output,
        protocol="mkvmerge",
        global_args=("-q", "--output", output, "--no-chapters"),
        inputs=tuple(inputs),
        working_dir=os.getcwd(),
    )
