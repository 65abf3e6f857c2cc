"""
fltk-check Process Runner — Spawn external tools and capture their output.

Every external invocation made by the prober goes through run_tool(), so
that a missing binary is reported as data (ToolRun.spawned == False)
instead of an exception bubbling up through the check battery.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ToolRun:
    """Outcome of a single external tool invocation."""
    args: list[str]
    spawned: bool            # False if the executable could not be started
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.spawned and self.returncode == 0


# Signature shared by run_tool and the fakes used in tests
Runner = Callable[..., ToolRun]


def run_tool(
    args: Sequence[str],
    cwd: str | Path | None = None,
    timeout: Optional[float] = None,
) -> ToolRun:
    """Run an external tool and capture its output.

    Args:
        args: Command line, executable first (e.g., ["cmake", "--version"]).
        cwd: Working directory for the child process.
        timeout: Seconds before the child is abandoned; None waits forever.

    Returns:
        ToolRun describing the invocation. Never raises for a tool that
        is missing, not executable, or timed out.
    """
    # Empty arguments are dropped (e.g., cl has no version flag)
    argv = [str(a) for a in args if a != ""]
    logger.debug("running %s (cwd=%s)", " ".join(argv), cwd or ".")
    try:
        result = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except OSError as e:
        logger.debug("could not spawn %s: %s", argv[0], e)
        return ToolRun(args=argv, spawned=False, stderr=str(e))
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %ss", argv[0], timeout)
        return ToolRun(args=argv, spawned=False, stderr=f"timed out after {timeout}s")

    logger.debug("%s exited with %s", argv[0], result.returncode)
    return ToolRun(
        args=argv,
        spawned=True,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
