# 07.10.26

import os
import shlex
import logging
import threading
import subprocess
from dataclasses import dataclass, field
from typing import IO, List, Optional, Sequence, Tuple


# External library
from rich.console import Console
from rich.markup import escape


# Internal utilities
from FragmentMux.utils import Logger


# Logic class
from .exceptions import ExternalToolError
from .object import MuxPlan


# Variable
logger = logging.getLogger(__name__)
console = Console()


@dataclass
class ToolResult:
    returncode: int
    diagnostics: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def __bool__(self) -> bool:
        return self.success


def _drain_stderr(stream: IO[str], diagnostics: List[str]) -> None:
    """Forward every stderr line so the child never blocks on a full pipe."""
    for line in iter(stream.readline, ''):
        line = line.rstrip()
        if not line:
            continue
        diagnostics.append(line)
        logger.warning(line)
    stream.close()


def invoke_tool(binary: str, args: Sequence[str], working_dir: Optional[str] = None) -> Tuple[int, List[str]]:
    """
    Run an external tool and block until it exits.

    Parameters:
        - binary (str): Executable path.
        - args (list[str]): Arguments, one token per item.
        - working_dir (str): Working directory for the process.

    Returns:
        tuple: (exit code, stderr lines). There is no timeout.
    """
    command = [binary] + list(args)
    logger.debug(f"{binary}: {shlex.join(list(args))}")

    try:
        proc = subprocess.Popen(
            command,
            cwd=working_dir,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ExternalToolError(binary, None, [str(e)]) from e

    diagnostics: List[str] = []
    reader = threading.Thread(target=_drain_stderr, args=(proc.stderr, diagnostics), daemon=True)
    reader.start()

    returncode = proc.wait()
    reader.join()
    return returncode, diagnostics


def run_plan(plan: MuxPlan, check: bool = False, description: str = "") -> ToolResult:
    """
    Execute a MuxPlan and report success from the exit status only.

    Parameters:
        - plan (MuxPlan): Command description from a builder.
        - check (bool): Raise ExternalToolError instead of returning a failed result.
        - description (str): Label printed on the console.

    Temporary files listed by the plan are removed once the process exits.
    """
    Logger()
    label = description or os.path.basename(plan.binary)
    console.print(f"[yellow]{escape(label)} [cyan]-> [red]{escape(os.path.basename(plan.output_path))}")

    try:
        returncode, diagnostics = invoke_tool(plan.binary, plan.args, plan.working_dir)
    finally:
        for temp_path in plan.temp_files:
            if os.path.exists(temp_path):
                os.remove(temp_path)

    result = ToolResult(returncode, diagnostics)
    if not result.success:
        logger.error(f"{label} failed with exit code {returncode}")
        if check:
            raise ExternalToolError(plan.binary, returncode, diagnostics)

    return result
