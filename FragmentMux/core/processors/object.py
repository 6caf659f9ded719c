# 02.10.26

from enum import Enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# Logic class
from .exceptions import UnsupportedFormatError


class MediaType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLES = "subtitles"
    OTHER = "other"


class MuxFormat(str, Enum):
    MP4 = "MP4"
    MKV = "MKV"
    TS = "TS"
    FLV = "FLV"
    M4A = "M4A"
    EAC3 = "EAC3"
    AAC = "AAC"
    AC3 = "AC3"

    @classmethod
    def parse(cls, value) -> "MuxFormat":
        """Accept a MuxFormat or a case-insensitive name like 'mkv' or '.mkv'."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lstrip('.').upper())
        except ValueError:
            raise UnsupportedFormatError(value) from None


@dataclass(frozen=True)
class OutputTrack:
    """A finished track waiting to be multiplexed."""
    path: str
    media_type: MediaType = MediaType.VIDEO
    language: Optional[str] = None
    description: Optional[str] = None
    stream_count: int = 1

    @property
    def streams(self) -> int:
        """Number of output streams this input contributes (at least one)."""
        return self.stream_count if self.stream_count > 0 else 1


@dataclass(frozen=True)
class StreamMetadata:
    key: str
    value: str
    specifier: str = ""   # "" -> container, "s:3" -> output stream 3, "s:a:0" -> first audio

    def to_args(self) -> List[str]:
        option = f"-metadata:{self.specifier}" if self.specifier else "-metadata"
        return [option, f"{self.key}={self.value}"]


@dataclass(frozen=True)
class Disposition:
    specifier: str
    value: str

    def to_args(self) -> List[str]:
        return [f"-disposition:{self.specifier}", self.value]


@dataclass(frozen=True)
class MuxPlan:
    """
    Declarative description of one external multiplexer invocation.

    Built once by the command builders and rendered to an argument list only
    when the process is started.
    """
    binary: str
    output_path: str
    protocol: str = "ffmpeg"
    global_args: Tuple[str, ...] = ()
    inputs: Tuple[Tuple[str, ...], ...] = ()
    maps: Tuple[str, ...] = ()
    codec_args: Tuple[str, ...] = ()
    metadata: Tuple[StreamMetadata, ...] = ()
    dispositions: Tuple[Disposition, ...] = ()
    trailing_args: Tuple[str, ...] = ()
    working_dir: Optional[str] = None
    temp_files: Tuple[str, ...] = ()

    @property
    def args(self) -> List[str]:
        args = list(self.global_args)
        for group in self.inputs:
            args.extend(group)

        # mkvmerge binds every flag to the following input, nothing else to add
        if self.protocol == "mkvmerge":
            return args

        for target in self.maps:
            args.extend(["-map", target])
        args.extend(self.codec_args)
        for item in self.metadata:
            args.extend(item.to_args())
        for item in self.dispositions:
            args.extend(item.to_args())
        args.extend(self.trailing_args)
        args.append(self.output_path)
        return args

    @property
    def command(self) -> List[str]:
        return [self.binary] + self.args

    def metadata_for(self, specifier: str) -> Dict[str, str]:
        """Collect the metadata key/values addressed to one specifier."""
        return {item.key: item.value for item in self.metadata if item.specifier == specifier}

    def disposition_for(self, specifier: str) -> Optional[str]:
        values = [item.value for item in self.dispositions if item.specifier == specifier]
        return values[-1] if values else None
