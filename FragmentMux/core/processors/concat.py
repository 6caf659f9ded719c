# 03.10.26

import os
import sys
import shutil
import logging
from typing import BinaryIO, List, Optional, Sequence, Union


# Internal utilities
from FragmentMux.utils import config_manager


# Logic class
from .exceptions import MissingInputError, IOFailureError


# Variable
logger = logging.getLogger(__name__)
PARTIAL_THRESHOLD = config_manager.config.get_int("MERGE", "partial_threshold", default=90000)
SMALL_BATCH_SIZE = config_manager.config.get_int("MERGE", "small_batch_size", default=100)
LARGE_BATCH_SIZE = config_manager.config.get_int("MERGE", "large_batch_size", default=200)
INTERMEDIATE_PREFIX = config_manager.config.get("MERGE", "intermediate_prefix", "T")
INTERMEDIATE_EXTENSION = config_manager.config.get("MERGE", "intermediate_extension", ".ts")


def _copy_into(input_path: str, output_stream: BinaryIO) -> None:
    try:
        with open(input_path, 'rb') as input_stream:
            shutil.copyfileobj(input_stream, output_stream)

    except FileNotFoundError as e:
        raise MissingInputError(input_path) from e
    except OSError as e:
        raise IOFailureError(input_path, f"Failed to copy {input_path}: {e}") from e


def combine_files(files: Optional[Sequence[str]], output: Union[str, os.PathLike, BinaryIO, None] = None) -> None:
    """
    Append existing files, byte for byte and in order, to a single destination.

    Parameters:
        - files (list[str]): Ordered input paths. Empty entries are skipped.
        - output: Destination path (parent folders are created), an open binary
          stream owned by the caller, or None for standard output.

    Raises:
        - MissingInputError: An input does not exist.
        - IOFailureError: Read, write or permission failure.

    The first failure aborts the whole copy; whatever was already written to the
    destination is left in place and must be treated as untrustworthy.
    """
    if not files:
        return

    close_output = False
    if output is None:
        output_stream = sys.stdout.buffer
    elif isinstance(output, (str, os.PathLike)):
        output_path = os.fspath(output)
        output_dir = os.path.dirname(output_path)
        try:
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            output_stream = open(output_path, 'wb')
        except OSError as e:
            raise IOFailureError(output_path, f"Cannot create {output_path}: {e}") from e
        close_output = True
    else:
        output_stream = output

    try:
        for input_path in files:
            if not input_path:
                continue
            _copy_into(input_path, output_stream)

        try:
            output_stream.flush()
        except OSError as e:
            raise IOFailureError(str(output), f"Failed to flush output: {e}") from e

    finally:
        if close_output:
            output_stream.close()


def get_batch_size(count: int) -> int:
    """Fragments per intermediate file for a merge of ``count`` fragments."""
    return SMALL_BATCH_SIZE if count <= PARTIAL_THRESHOLD else LARGE_BATCH_SIZE


def partial_combine(files: Sequence[str]) -> List[str]:
    """
    Merge fragments batch by batch into numbered intermediate files.

    Parameters:
        - files (list[str]): Ordered fragment paths.

    Returns:
        list[str]: Intermediate paths, in order, named T0000.ts, T0001.ts, ...
        next to the first fragment.

    Each batch is fully written before its fragments are deleted, and the next
    batch only starts afterwards. A failure leaves the failing batch's fragments
    untouched; earlier intermediates are kept.
    """
    files = [f for f in files or [] if f]
    if not files:
        return []

    batch_size = get_batch_size(len(files))
    output_dir = os.path.dirname(files[0])
    new_files = []

    logger.info(f"Partial merge of {len(files)} fragments in batches of {batch_size}")

    for index, start in enumerate(range(0, len(files), batch_size)):
        items = files[start:start + batch_size]
        output = os.path.join(output_dir, f"{INTERMEDIATE_PREFIX}{index:04d}{INTERMEDIATE_EXTENSION}")

        combine_files(items, output)
        new_files.append(output)

        # A fragment may repeat within a batch; delete each path once
        for item in dict.fromkeys(items):
            try:
                os.remove(item)
            except OSError as e:
                raise IOFailureError(item, f"Cannot delete merged fragment {item}: {e}") from e

        logger.debug(f"Batch {index} -> {output} ({len(items)} fragments)")

    return new_files
