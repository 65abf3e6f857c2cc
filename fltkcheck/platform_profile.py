"""
fltk-check Platform Profiles — System libraries fltk-rs links against.

A PlatformProfile bundles everything that differs between hosts:
  - the libraries (or macOS frameworks) the final binary links against
  - the compiler family (POSIX `c++` or MSVC `cl`)
  - the link convention used to name a library on the command line

The profile is selected once at startup by inspecting the running
platform and probing for a POSIX environment. On Windows the probe is
what distinguishes MSYS2/MinGW shells from a Visual Studio prompt.
"""

import logging
import platform
from dataclasses import dataclass
from enum import Enum

from fltkcheck.process import Runner, run_tool

logger = logging.getLogger(__name__)


class CompilerFamily(Enum):
    """Which compiler command-line convention the host uses."""
    POSIX = "posix"    # gcc/clang style: c++ -l<name>
    MSVC = "msvc"      # cl.exe: <name>.lib


class LinkStyle(Enum):
    """How a library is named when linking."""
    LIBRARY_FLAG = "library_flag"   # -l<name>
    FRAMEWORK = "framework"         # -framework <name>
    LIB_FILE = "lib_file"           # <name>.lib


# =============================================================================
# Library requirements per operating system
# =============================================================================

WINDOWS_LIBS: tuple[str, ...] = (
    "ws2_32", "comctl32", "gdi32", "oleaut32", "ole32", "uuid", "shell32",
    "advapi32", "comdlg32", "winspool", "user32", "kernel32", "odbc32",
    "gdiplus", "opengl32", "glu32",
)

MACOS_FRAMEWORKS: tuple[str, ...] = ("Carbon", "Cocoa", "ApplicationServices", "OpenGL")

# X11/pango stack used on Linux and the BSDs
UNIX_LIBS: tuple[str, ...] = (
    "pthread",
    "X11",
    "Xext",
    "Xinerama",
    "Xcursor",
    "Xrender",
    "Xfixes",
    "Xft",
    "fontconfig",
    "pango-1.0",
    "pangoxft-1.0",
    "gobject-2.0",
    "cairo",
    "pangocairo-1.0",
    "GL",
    "GLU",
)


@dataclass(frozen=True)
class PlatformProfile:
    """Immutable description of the host's build conventions."""
    os_name: str                  # "windows", "macos" or "linux" (any other unix)
    libraries: tuple[str, ...]
    compiler_family: CompilerFamily
    link_style: LinkStyle

    @property
    def compiler(self) -> str:
        return "cl" if self.compiler_family is CompilerFamily.MSVC else "c++"

    @property
    def is_windows(self) -> bool:
        return self.os_name == "windows"


def normalize_os_name(system: str) -> str:
    """Map platform.system() output onto the names profiles are keyed by."""
    system = system.lower()
    if system == "windows" or system.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    if system == "darwin":
        return "macos"
    return "linux"


def detect_compiler_family(runner: Runner = run_tool) -> CompilerFamily:
    """Probe for a POSIX environment.

    If `uname -a` can be run the host has a POSIX userland (Linux, macOS,
    or MSYS2/Cygwin on Windows) and a gcc/clang-style compiler is assumed;
    otherwise the host is treated as a plain MSVC environment.
    """
    run = runner(["uname", "-a"])
    family = CompilerFamily.POSIX if run.spawned else CompilerFamily.MSVC
    logger.debug("compiler family probe: %s", family.value)
    return family


def build_profile(os_name: str, compiler_family: CompilerFamily) -> PlatformProfile:
    """Assemble the profile for a given OS and compiler family."""
    if os_name == "windows":
        libraries = WINDOWS_LIBS
    elif os_name == "macos":
        libraries = MACOS_FRAMEWORKS
    else:
        libraries = UNIX_LIBS

    if compiler_family is CompilerFamily.MSVC:
        link_style = LinkStyle.LIB_FILE
    elif os_name == "macos":
        link_style = LinkStyle.FRAMEWORK
    else:
        link_style = LinkStyle.LIBRARY_FLAG

    return PlatformProfile(
        os_name=os_name,
        libraries=libraries,
        compiler_family=compiler_family,
        link_style=link_style,
    )


def detect_profile(runner: Runner = run_tool) -> PlatformProfile:
    """Select the profile for the running host."""
    os_name = normalize_os_name(platform.system())
    profile = build_profile(os_name, detect_compiler_family(runner))
    logger.debug(
        "platform profile: os=%s compiler=%s libraries=%d",
        profile.os_name, profile.compiler, len(profile.libraries),
    )
    return profile
