from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path

import pytest
from rich.console import Console

from fltkcheck.config import Settings, get_settings
from fltkcheck.platform_profile import CompilerFamily, PlatformProfile, build_profile
from fltkcheck.process import ToolRun
from fltkcheck.prober import SOURCE_NAME
from fltkcheck.reporter import ConsoleReporter

RUSTC_VERBOSE = """\
rustc 1.70.0 (90c541806 2023-05-31)
binary: rustc
commit-hash: 90c541806f23a127002de5b4038be731ba1458ca
commit-date: 2023-05-31
host: x86_64-unknown-linux-gnu
release: 1.70.0
LLVM version: 16.0.2
"""


def rustc_output(release: str, host: str = "x86_64-unknown-linux-gnu") -> str:
    return (
        f"rustc {release} (90c541806 2023-05-31)\n"
        "binary: rustc\n"
        f"host: {host}\n"
        f"release: {release}\n"
    )


def _linked_library(args: list[str]) -> str | None:
    for i, arg in enumerate(args):
        if arg.startswith("-l"):
            return arg[2:]
        if arg == "-framework":
            return args[i + 1]
        if arg.endswith(".lib"):
            return arg[: -len(".lib")]
    return None


class FakeHost:
    """Stands in for run_tool: answers like a machine with the given tools."""

    def __init__(
        self,
        rustc: str = RUSTC_VERBOSE,
        missing: Iterable[str] = (),
        missing_libraries: Iterable[str] = (),
        cxx11: bool = True,
    ):
        self.rustc = rustc
        self.missing = set(missing)
        self.missing_libraries = set(missing_libraries)
        self.cxx11 = cxx11
        self.calls: list[list[str]] = []

    def __call__(self, args, cwd=None, timeout=None) -> ToolRun:
        args = [a for a in args if a != ""]
        self.calls.append(args)
        exe = args[0]
        if exe in self.missing:
            return ToolRun(args=args, spawned=False, stderr="No such file or directory")
        if exe == "rustc":
            return ToolRun(args=args, spawned=True, returncode=0, stdout=self.rustc)
        if exe in ("c++", "cl"):
            return self._compiler(args, Path(cwd) if cwd else Path.cwd())
        return ToolRun(args=args, spawned=True, returncode=0, stdout=f"{exe} version 1.0\n")

    def _compiler(self, args: list[str], cwd: Path) -> ToolRun:
        msvc = args[0] == "cl"
        if "--version" in args or len(args) == 1:
            return ToolRun(args=args, spawned=True, returncode=0, stdout="compiler 1.0\n")

        assert (cwd / SOURCE_NAME).exists(), "compiler invoked without probe source"
        library = _linked_library(args)

        if library is None:
            if not self.cxx11:
                return ToolRun(args=args, spawned=True, returncode=1, stderr="error: expected ';'\n")
            outputs = ["fltk_check_file.exe", "fltk_check_file.obj"] if msvc else ["a.out"]
        else:
            if library in self.missing_libraries:
                if msvc:
                    return ToolRun(
                        args=args, spawned=True, returncode=2,
                        stdout=f"LINK : fatal error LNK1181: cannot open input file '{library}.lib'\n",
                    )
                return ToolRun(
                    args=args, spawned=True, returncode=1,
                    stderr=f"/usr/bin/ld: cannot find -l{library}\n",
                )
            outputs = []
            for i, arg in enumerate(args):
                if arg == "-o":
                    outputs.append(args[i + 1])
                elif arg.startswith(("/Fe", "/Fo")):
                    outputs.append(arg[3:])

        for name in outputs:
            if (cwd / name).is_dir():
                continue
            (cwd / name).write_text("binary")
        stdout = "Microsoft (R) C/C++ Optimizing Compiler\n" if msvc else ""
        return ToolRun(args=args, spawned=True, returncode=0, stdout=stdout)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(workdir=tmp_path, jobs=4)


@pytest.fixture()
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def reporter(output: io.StringIO) -> ConsoleReporter:
    console = Console(file=output, force_terminal=True, color_system="standard", width=200)
    return ConsoleReporter(console=console)


@pytest.fixture()
def linux_profile() -> PlatformProfile:
    return build_profile("linux", CompilerFamily.POSIX)
