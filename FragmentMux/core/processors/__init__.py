# 08.10.26

from .concat import combine_files, partial_combine, get_batch_size
from .merger import FileMerger
from .merge import build_merge_command, build_mux_command, get_mux_extension, read_sidecar_audio
from .mkvmerge import build_mkvmerge_command
from .capture import invoke_tool, run_plan, ToolResult
from .mux import merge_by_ffmpeg, mux_inputs_by_ffmpeg, mux_inputs_by_mkvmerge, mux_tracks
from .object import MediaType, MuxFormat, OutputTrack, StreamMetadata, Disposition, MuxPlan
from .exceptions import MergeError, MissingInputError, IOFailureError, ExternalToolError, UnsupportedFormatError

__all__ = [
    "combine_files",
    "partial_combine",
    "get_batch_size",
    "FileMerger",
    "build_merge_command",
    "build_mux_command",
    "get_mux_extension",
    "read_sidecar_audio",
    "build_mkvmerge_command",
    "invoke_tool",
    "run_plan",
    "ToolResult",
    "merge_by_ffmpeg",
    "mux_inputs_by_ffmpeg",
    "mux_inputs_by_mkvmerge",
    "mux_tracks",
    "MediaType",
    "MuxFormat",
    "OutputTrack",
    "StreamMetadata",
    "Disposition",
    "MuxPlan",
    "MergeError",
    "MissingInputError",
    "IOFailureError",
    "ExternalToolError",
    "UnsupportedFormatError"
]
