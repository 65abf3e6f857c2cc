"""
fltk-check Version Detector — Read the Rust toolchain version from the host.

Given the name of a rustc executable, this module can:
  1. Run `rustc --version -v` and capture its verbose report
  2. Parse the release version and the host triple out of that report
  3. Compare the parsed version against the minimum fltk-rs supports

Parsing is tolerant: output in an unexpected format yields None rather
than an exception, so the prober can report it as a failed check.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from packaging.version import InvalidVersion, Version

from fltkcheck.process import Runner, run_tool

# fltk-rs needs Rust 1.46 or newer within the 1.x series
REQUIRED_MAJOR = 1
MINIMUM_MINOR = 45

# Matches `key: value` lines of `rustc -vV`
_FIELD_RE = re.compile(r"^(?P<key>[\w ]+):\s*(?P<value>\S+)\s*$")


@dataclass
class ToolchainVersion:
    """Version information reported by a Rust toolchain."""
    major: int
    minor: int
    host: str        # Host triple (e.g., "x86_64-unknown-linux-gnu")
    release: str     # Raw release string (e.g., "1.70.0-nightly")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor} ({self.host})"


def _parse_fields(output: str) -> dict[str, str]:
    fields = {}
    for line in output.splitlines():
        match = _FIELD_RE.match(line.strip())
        if match:
            fields[match.group("key").strip()] = match.group("value")
    return fields


def parse_version_output(output: str) -> Optional[ToolchainVersion]:
    """Parse the output of `rustc --version -v`.

    The `release:` line is preferred; if it is absent the second token of
    the first line (`rustc 1.70.0 (90c541806 2023-05-31)`) is used.

    Args:
        output: Captured standard output of the version command.

    Returns:
        ToolchainVersion, or None if no version could be recovered.
    """
    fields = _parse_fields(output)

    release = fields.get("release")
    if release is None:
        tokens = output.split()
        if len(tokens) < 2:
            return None
        release = tokens[1]

    # Channel suffixes are not PEP 440: "1.70.0-nightly" → "1.70.0"
    numeric = release.split("-", 1)[0]
    try:
        parts = Version(numeric).release
    except InvalidVersion:
        return None
    if len(parts) < 2:
        return None

    return ToolchainVersion(
        major=parts[0],
        minor=parts[1],
        host=fields.get("host", "unknown"),
        release=release,
    )


def is_supported(
    version: ToolchainVersion,
    required_major: int = REQUIRED_MAJOR,
    minimum_minor: int = MINIMUM_MINOR,
) -> bool:
    """Check whether a toolchain is recent enough.

    The major version must match exactly; the minor version must be
    strictly greater than the minimum (1.45 → unsupported, 1.46 → ok).
    """
    return version.major == required_major and version.minor > minimum_minor


def detect_toolchain(
    executable: str = "rustc",
    cwd: str | Path | None = None,
    runner: Runner = run_tool,
    timeout: Optional[float] = None,
) -> tuple[Optional[ToolchainVersion], str]:
    """Query a toolchain for its version.

    Args:
        executable: rustc executable name or path.
        cwd: Working directory for the child process.
        runner: Command runner (run_tool, or a fake in tests).
        timeout: Seconds before the child is abandoned.

    Returns:
        (version, raw_output). version is None if the toolchain could not be
        run or its output could not be parsed.
    """
    run = runner([executable, "--version", "-v"], cwd=cwd, timeout=timeout)
    if not run.succeeded:
        return None, run.stderr
    return parse_version_output(run.stdout), run.stdout
