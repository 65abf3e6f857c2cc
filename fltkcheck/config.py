"""
fltk-check Settings — Runtime configuration read from the environment.

Command-line flags in main.py override these values for a single run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(key: str) -> float | None:
    value = os.environ.get(key)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _default_jobs() -> int:
    return min(8, os.cpu_count() or 1)


@dataclass
class Settings:
    """Runtime settings derived from environment variables with sensible defaults."""

    workdir: Path = field(default_factory=Path.cwd)
    jobs: int = field(default_factory=_default_jobs)
    timeout: float | None = None
    rustc: str = "rustc"
    git: str = "git"
    cmake: str = "cmake"
    ninja: str = "ninja"
    cxx: str | None = None

    def __post_init__(self) -> None:
        self.workdir = Path(self.workdir)
        self.jobs = max(1, self.jobs)
        if self.timeout is not None and self.timeout <= 0:
            self.timeout = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        workdir=Path(os.environ.get("FLTKCHECK_WORKDIR") or Path.cwd()),
        jobs=_env_int("FLTKCHECK_JOBS", _default_jobs()),
        timeout=_env_float("FLTKCHECK_TIMEOUT"),
        rustc=os.environ.get("RUSTC", "rustc"),
        git=os.environ.get("FLTKCHECK_GIT", "git"),
        cmake=os.environ.get("FLTKCHECK_CMAKE", "cmake"),
        ninja=os.environ.get("FLTKCHECK_NINJA", "ninja"),
        cxx=os.environ.get("FLTKCHECK_CXX") or None,
    )
