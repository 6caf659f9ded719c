# 02.10.26

from typing import List, Optional


class MergeError(Exception):
    """Base class for every failure raised while merging or muxing."""


class MissingInputError(MergeError):
    """A fragment or track file does not exist at merge/mux time."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Missing input file: {path}")


class IOFailureError(MergeError):
    """Read, write or permission error while copying or writing a manifest."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"I/O failure on: {path}")


class ExternalToolError(MergeError):
    """The external multiplexer exited non-zero or could not be started."""

    def __init__(self, binary: str, returncode: Optional[int], diagnostics: Optional[List[str]] = None):
        self.binary = binary
        self.returncode = returncode
        self.diagnostics = list(diagnostics or [])

        if returncode is None:
            message = f"Unable to start {binary}"
        else:
            message = f"{binary} exited with code {returncode}"
        if self.diagnostics:
            message += ": " + self.diagnostics[-1]
        super().__init__(message)


class UnsupportedFormatError(MergeError, ValueError):
    """Unknown container format requested."""

    def __init__(self, mux_format):
        self.mux_format = mux_format
        super().__init__(f"unknown format: {mux_format}")
