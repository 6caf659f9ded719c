# 05.10.26

import os
import logging
import tempfile
from datetime import datetime
from typing import Callable, List, Optional, Sequence


# Internal utilities
from FragmentMux.utils import config_manager
from FragmentMux.setup import get_ffmpeg_path
from FragmentMux.utils.trans_language import convert_lang_code_and_display_name


# Logic class
from .exceptions import MissingInputError, IOFailureError, UnsupportedFormatError
from .object import MediaType, MuxFormat, OutputTrack, StreamMetadata, Disposition, MuxPlan


# Config
logger = logging.getLogger(__name__)
USE_AAC_FILTER = config_manager.config.get_bool("PROCESS", "use_aac_filter", default=True)
FAST_START = config_manager.config.get_bool("PROCESS", "fast_start")
WRITE_DATE = config_manager.config.get_bool("PROCESS", "write_date", default=True)
USE_CONCAT_DEMUXER = config_manager.config.get_bool("PROCESS", "use_concat_demuxer")
ENCODING_TOOL = config_manager.config.get("PROCESS", "encoding_tool", "")
FFMPEG_GLOBAL_ARGS = ("-loglevel", "warning", "-nostdin")

MUX_EXTENSIONS = {
    MuxFormat.MP4: ".mp4",
    MuxFormat.MKV: ".mkv",
    MuxFormat.TS: ".ts",
}
MERGE_EXTENSIONS = {
    MuxFormat.MP4: ".mp4",
    MuxFormat.MKV: ".mkv",
    MuxFormat.FLV: ".flv",
    MuxFormat.M4A: ".m4a",
    MuxFormat.TS: ".ts",
    MuxFormat.EAC3: ".eac3",
    MuxFormat.AAC: ".m4a",
    MuxFormat.AC3: ".ac3",
}


def get_mux_extension(mux_format) -> str:
    """Container extension for the multi-track mux path (MP4, MKV or TS)."""
    mux_format = MuxFormat.parse(mux_format)
    if mux_format not in MUX_EXTENSIONS:
        raise UnsupportedFormatError(mux_format.value)
    return MUX_EXTENSIONS[mux_format]


def read_sidecar_audio(output_path: str, directory: Optional[str] = None) -> Optional[str]:
    """
    Read the replacement DD+ audio path from the ``<name>.txt`` marker file.

    Parameters:
        - output_path (str): Output path without extension.
        - directory (str): Folder holding the marker, defaults to the current directory.

    Returns:
        str | None: Audio path written in the marker, None when there is no marker.
    """
    marker = os.path.join(directory or os.getcwd(), os.path.basename(output_path) + ".txt")
    if not os.path.isfile(marker):
        return None

    try:
        with open(marker, 'r', encoding='utf-8') as f:
            audio_path = f.read().strip()
    except OSError as e:
        raise IOFailureError(marker, f"Cannot read audio marker {marker}: {e}") from e

    return audio_path or None


def _check_inputs(paths: Sequence[str]) -> None:
    for path in paths:
        if not os.path.exists(path):
            raise MissingInputError(path)


def _escape_concat_path(path: str) -> str:
    return path.replace("'", "'\\''")


def write_concat_list(files: Sequence[str]) -> str:
    """Write a concat demuxer list (one ``file '<path>'`` per line) to a temp file."""
    fd, list_path = tempfile.mkstemp(prefix="concat_", suffix=".txt")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write("\n".join(f"file '{_escape_concat_path(os.path.abspath(p))}'" for p in files))
            f.write("\n")
    except OSError as e:
        raise IOFailureError(list_path, f"Cannot write concat list: {e}") from e

    return list_path


def build_merge_command(
    files: Sequence[str],
    output_path: str,
    mux_format="MP4",
    use_aac_filter: bool = USE_AAC_FILTER,
    fast_start: bool = FAST_START,
    write_date: bool = WRITE_DATE,
    use_concat_demuxer: bool = USE_CONCAT_DEMUXER,
    poster: str = "",
    audio_name: str = "",
    title: str = "",
    copyright: str = "",
    comment: str = "",
    encoding_tool: str = ENCODING_TOOL,
    rec_time: str = "",
    ddp_audio: Optional[str] = None,
    binary: Optional[str] = None,
) -> MuxPlan:
    """
    Build the ffmpeg invocation that joins intermediate files and remuxes them.

    Parameters:
        - files (list[str]): Ordered intermediate files.
        - output_path (str): Output path without extension, made absolute here.
        - mux_format: MP4, MKV, FLV, M4A, TS, EAC3, AAC or AC3.
        - use_aac_filter (bool): Apply the aac_adtstoasc bitstream filter.
        - fast_start (bool): Move the moov atom to the front (MP4 only).
        - write_date (bool): Write the date tag, ``rec_time`` or now.
        - use_concat_demuxer (bool): Use a concat list file instead of the concat: protocol.
        - poster (str): Image attached as cover (MP4 only).
        - ddp_audio (str): Replacement DD+ audio input (MP4 only); disables the AAC filter.

    Returns:
        MuxPlan: The command description, nothing is executed.
    """
    files = [f for f in files if f]
    if not files:
        raise ValueError("No input files to merge")

    mux_format = MuxFormat.parse(mux_format)
    if mux_format not in MERGE_EXTENSIONS:
        raise UnsupportedFormatError(mux_format.value)

    _check_inputs(files)
    extra_inputs = [p for p in (poster, ddp_audio) if p and mux_format == MuxFormat.MP4]
    _check_inputs(extra_inputs)

    output = os.path.abspath(output_path) + MERGE_EXTENSIONS[mux_format]
    working_dir = os.path.dirname(os.path.abspath(files[0]))
    if ddp_audio:
        use_aac_filter = False

    temp_files = []
    if use_concat_demuxer:
        list_path = write_concat_list(files)
        temp_files.append(list_path)
        inputs = [("-f", "concat", "-safe", "0", "-i", list_path)]
    else:
        inputs = [("-i", "concat:" + "|".join(os.path.basename(f) for f in files))]

    maps: List[str] = []
    codec_args = ["-c", "copy"]
    metadata: List[StreamMetadata] = []
    dispositions: List[Disposition] = []
    trailing_args: List[str] = []

    if mux_format == MuxFormat.MP4:
        if poster:
            inputs.append(("-i", poster))
        if ddp_audio:
            inputs.append(("-i", ddp_audio))

        maps.append("0:v?")
        if ddp_audio:
            maps.append("2:a" if poster else "1:a")
        maps.append("0:a?")

        if poster:
            maps.append("1")
            codec_args += ["-c:v:1", "copy"]
            dispositions.append(Disposition("v:1", "attached_pic"))

        if write_date:
            date_string = rec_time or datetime.now().astimezone().isoformat()
            metadata.append(StreamMetadata("date", date_string))
        metadata += [
            StreamMetadata("encoding_tool", encoding_tool),
            StreamMetadata("title", title),
            StreamMetadata("copyright", copyright),
            StreamMetadata("comment", comment),
        ]

        # The replacement audio is mapped first, the original track moves to a:1
        audio_index = 1 if ddp_audio else 0
        metadata += [
            StreamMetadata("title", audio_name, f"s:a:{audio_index}"),
            StreamMetadata("handler", audio_name, f"s:a:{audio_index}"),
        ]
        if ddp_audio:
            metadata += [
                StreamMetadata("title", "DD+", "s:a:0"),
                StreamMetadata("handler", "DD+", "s:a:0"),
            ]

        if fast_start:
            trailing_args += ["-movflags", "+faststart"]
        trailing_args.append("-y")
        if use_aac_filter:
            trailing_args += ["-bsf:a", "aac_adtstoasc"]

    elif mux_format in (MuxFormat.MKV, MuxFormat.FLV, MuxFormat.M4A):
        maps.append("0")
        if mux_format == MuxFormat.M4A:
            codec_args += ["-f", "mp4"]
        trailing_args.append("-y")
        if use_aac_filter:
            trailing_args += ["-bsf:a", "aac_adtstoasc"]

    elif mux_format == MuxFormat.TS:
        maps.append("0")
        trailing_args += ["-y", "-f", "mpegts", "-bsf:v", "h264_mp4toannexb"]

    else:
        # EAC3, AAC, AC3: audio only
        maps.append("0:a")
        trailing_args.append("-y")

    return MuxPlan(
        binary=binary or get_ffmpeg_path(),
        output_path=output,
        global_args=FFMPEG_GLOBAL_ARGS,
        inputs=tuple(inputs),
        maps=tuple(maps),
        codec_args=tuple(codec_args),
        metadata=tuple(metadata),
        dispositions=tuple(dispositions),
        trailing_args=tuple(trailing_args),
        working_dir=working_dir,
        temp_files=tuple(temp_files),
    )


def build_mux_command(
    tracks: Sequence[OutputTrack],
    output_path: str,
    mux_format="MP4",
    date_info: bool = WRITE_DATE,
    lang_resolver: Callable[[OutputTrack], OutputTrack] = convert_lang_code_and_display_name,
    binary: Optional[str] = None,
) -> MuxPlan:
    """
    Build the ffmpeg invocation that muxes finished tracks into one container.

    Parameters:
        - tracks (list[OutputTrack]): Tracks in output order.
        - output_path (str): Output path without extension, made absolute here.
        - mux_format: MP4, MKV or TS.
        - date_info (bool): Write the current date as container metadata.
        - lang_resolver (callable): Normalizes language and title of one track.

    Returns:
        MuxPlan: The command description, nothing is executed.
    """
    extension = get_mux_extension(mux_format)
    mux_format = MuxFormat.parse(mux_format)
    if not tracks:
        raise ValueError("No tracks to mux")
    _check_inputs([t.path for t in tracks])

    inputs = tuple(("-i", t.path) for t in tracks)
    maps = tuple(str(i) for i in range(len(tracks)))

    codec_args = ["-strict", "unofficial", "-c:a", "copy", "-c:v", "copy"]
    if mux_format == MuxFormat.MP4:
        # mp4 cannot carry vtt/srt, convert to its own text codec
        codec_args += ["-c:s", "mov_text"]
    elif mux_format == MuxFormat.MKV:
        has_srt = any(t.path.lower().endswith(".srt") for t in tracks)
        codec_args += ["-c:s", "srt" if has_srt else "webvtt"]
    codec_args += ["-map_metadata", "-1"]

    metadata: List[StreamMetadata] = []
    stream_index = 0
    for track in tracks:
        track = lang_resolver(track)
        metadata.append(StreamMetadata("language", track.language or "und", f"s:{stream_index}"))
        if track.description:
            metadata.append(StreamMetadata("title", track.description, f"s:{stream_index}"))

        # -metadata:s:N addresses the N-th output stream, not the N-th input
        stream_index += track.streams

    dispositions: List[Disposition] = []
    if any(t.media_type == MediaType.VIDEO for t in tracks):
        dispositions.append(Disposition("v:0", "default"))
    if any(t.media_type == MediaType.SUBTITLES for t in tracks):
        dispositions.append(Disposition("s", "0"))

    audio_streams = sum(t.streams for t in tracks if t.media_type == MediaType.AUDIO)
    if audio_streams:
        dispositions.append(Disposition("a:0", "default"))
        for i in range(1, audio_streams):
            dispositions.append(Disposition(f"a:{i}", "0"))

    if date_info:
        metadata.append(StreamMetadata("date", datetime.now().astimezone().isoformat()))

    logger.debug(f"Mux plan: {len(tracks)} inputs, {stream_index} output streams")

    return MuxPlan(
        binary=binary or get_ffmpeg_path(),
        output_path=os.path.abspath(output_path) + extension,
        global_args=FFMPEG_GLOBAL_ARGS + ("-y", "-dn"),
        inputs=inputs,
        maps=maps,
        codec_args=tuple(codec_args),
        metadata=tuple(metadata),
        dispositions=tuple(dispositions),
        trailing_args=("-ignore_unknown", "-copy_unknown"),
        working_dir=os.getcwd(),
    )
