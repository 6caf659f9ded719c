# 04.10.26

import os
import re
import logging
from typing import List


# External libraries
from rich.console import Console


# Internal utilities
from FragmentMux.utils import config_manager


# Logic class
from .concat import combine_files, partial_combine
from .exceptions import IOFailureError


# Variable
logger = logging.getLogger(__name__)
console = Console()
PARTIAL_MERGE_MIN_FILES = config_manager.config.get_int("MERGE", "partial_merge_min_files", default=1800)
SEGMENT_RE = re.compile(r'^seg_(\d+)\.\w+$')
INIT_RE = re.compile(r'^init\.\w+$')


class FileMerger:
    @staticmethod
    def collect_segments(segment_dir: str) -> List[str]:
        """Init segment (if any) followed by seg_<n> files in numeric order."""
        init_files = []
        segments = []

        for name in os.listdir(segment_dir):
            if INIT_RE.match(name):
                init_files.append(os.path.join(segment_dir, name))
                continue

            match = SEGMENT_RE.match(name)
            if match:
                segments.append((int(match.group(1)), os.path.join(segment_dir, name)))

        segments.sort(key=lambda item: item[0])
        return sorted(init_files)[:1] + [path for _, path in segments]

    @staticmethod
    def merge(files: List[str], output_file: str) -> str:
        """
        Binary-merge an ordered list of fragments into ``output_file``.

        Large fragment sets are first reduced to intermediate files, which are
        removed once the final file is written. Any error propagates.
        """
        files = [f for f in files if f]
        count = len(files)
        if count >= PARTIAL_MERGE_MIN_FILES:
            console.print(f"[yellow]Merge [cyan]Partial merge of [red]{count} [cyan]fragments")
            files = partial_combine(files)

            combine_files(files, output_file)
            for intermediate in files:
                try:
                    os.remove(intermediate)
                except OSError as e:
                    raise IOFailureError(intermediate, f"Cannot delete intermediate {intermediate}: {e}") from e
        else:
            combine_files(files, output_file)

        logger.info(f"Merged {count} fragments into {output_file}")
        return output_file

    @staticmethod
    def merge_dir(segment_dir: str, output_file: str) -> str:
        return FileMerger.merge(FileMerger.collect_segments(segment_dir), output_file)
