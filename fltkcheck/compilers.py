"""
fltk-check Compiler Drivers — Uniform interface over C++ compiler families.

Each driver knows how to:
  1. Ask its compiler to identify itself
  2. Compile the probe source with no extra flags
  3. Compile the probe source while linking one library
  4. Decide from the captured output whether an invocation succeeded

The two families judge success differently: gcc/clang report problems on
stderr, while cl.exe prints everything (including link errors) to stdout.
Drivers hide that behind CompileResult so the prober stays platform
agnostic.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from fltkcheck.platform_profile import CompilerFamily, LinkStyle, PlatformProfile
from fltkcheck.process import ToolRun

# cl.exe marker for an unresolved library or object
MSVC_LINK_ERROR = "LINK : fatal error"


@dataclass
class CompileResult:
    """Outcome of one compiler invocation."""
    succeeded: bool
    diagnostic: str = ""   # First relevant line of compiler output, if any


def _artifact_stem(library: str) -> str:
    """Filesystem-safe per-library output stem (pango-1.0 → fltk_check_pango_1_0)."""
    return "fltk_check_" + re.sub(r"[^A-Za-z0-9]", "_", library)


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


class CompilerDriver(ABC):
    """Abstract base class for compiler drivers."""

    family: CompilerFamily

    def __init__(self, executable: str):
        self.executable = executable

    @abstractmethod
    def version_args(self) -> list[str]:
        """Command line that proves the compiler can be run."""

    def is_present(self, run: ToolRun) -> bool:
        """Whether the version_args() invocation proves the compiler works."""
        return run.succeeded

    @abstractmethod
    def compile_args(self, source: str) -> list[str]:
        """Command line compiling `source` with the compiler's defaults."""

    @abstractmethod
    def link_args(self, source: str, library: str) -> list[str]:
        """Command line compiling `source` and linking against `library`."""

    @abstractmethod
    def evaluate(self, run: ToolRun) -> CompileResult:
        """Turn a captured invocation into a CompileResult."""

    @abstractmethod
    def default_artifacts(self, source: str) -> list[str]:
        """Outputs written by compile_args() under their default names."""

    @abstractmethod
    def library_artifacts(self, library: str) -> list[str]:
        """Outputs written by link_args() for `library`."""


class PosixDriver(CompilerDriver):
    """gcc/clang-style driver (`c++`), used on Linux, macOS and MinGW."""

    family = CompilerFamily.POSIX

    def __init__(self, executable: str = "c++", link_style: LinkStyle = LinkStyle.LIBRARY_FLAG):
        super().__init__(executable)
        self.link_style = link_style

    def version_args(self) -> list[str]:
        return [self.executable, "--version"]

    def compile_args(self, source: str) -> list[str]:
        return [self.executable, source]

    def link_args(self, source: str, library: str) -> list[str]:
        if self.link_style is LinkStyle.FRAMEWORK:
            link = ["-framework", library]
        else:
            link = [f"-l{library}"]
        output = self.library_artifacts(library)[0]
        return [self.executable, "-std=c++11", source, *link, "-o", output]

    def evaluate(self, run: ToolRun) -> CompileResult:
        if not run.spawned:
            return CompileResult(False, _first_line(run.stderr))
        # Any diagnostic (even a warning) means the library is not usable as-is
        if run.returncode != 0 or run.stderr.strip():
            return CompileResult(False, _first_line(run.stderr) or f"exit status {run.returncode}")
        return CompileResult(True)

    def default_artifacts(self, source: str) -> list[str]:
        # MinGW names its default output a.exe
        return ["a.out", "a.exe"]

    def library_artifacts(self, library: str) -> list[str]:
        return [_artifact_stem(library) + ".out"]


class MsvcDriver(CompilerDriver):
    """Visual Studio driver (`cl`)."""

    family = CompilerFamily.MSVC

    def __init__(self, executable: str = "cl"):
        super().__init__(executable)

    def version_args(self) -> list[str]:
        # cl prints its banner when run without arguments
        return [self.executable]

    def is_present(self, run: ToolRun) -> bool:
        # The bare banner invocation exits non-zero on some toolsets
        return run.spawned

    def compile_args(self, source: str) -> list[str]:
        return [self.executable, source]

    def link_args(self, source: str, library: str) -> list[str]:
        exe, obj = self.library_artifacts(library)
        return [self.executable, source, f"{library}.lib", f"/Fe{exe}", f"/Fo{obj}"]

    def evaluate(self, run: ToolRun) -> CompileResult:
        if not run.spawned:
            return CompileResult(False, _first_line(run.stderr))
        if not run.stdout.strip():
            return CompileResult(False, "no output from cl")
        for line in run.stdout.splitlines():
            if MSVC_LINK_ERROR in line:
                return CompileResult(False, line.strip())
        if run.returncode != 0:
            return CompileResult(False, f"exit status {run.returncode}")
        return CompileResult(True)

    def default_artifacts(self, source: str) -> list[str]:
        stem = source.rsplit(".", 1)[0]
        return [f"{stem}.exe", f"{stem}.obj"]

    def library_artifacts(self, library: str) -> list[str]:
        stem = _artifact_stem(library)
        return [f"{stem}.exe", f"{stem}.obj"]


def driver_for(profile: PlatformProfile, executable: str | None = None) -> CompilerDriver:
    """Create the driver matching a platform profile.

    Args:
        profile: Active platform profile.
        executable: Compiler override (e.g., "clang++"); defaults to the
            profile's compiler.
    """
    executable = executable or profile.compiler
    if profile.compiler_family is CompilerFamily.MSVC:
        return MsvcDriver(executable)
    return PosixDriver(executable, link_style=profile.link_style)
