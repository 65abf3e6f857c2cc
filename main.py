"""
fltk-check Runner

Checks whether this machine can build fltk-rs:
  1. Rust toolchain version (1.46 or newer)
  2. git, CMake and Ninja (optional)
  3. A C++ compiler supporting C++11
  4. The system libraries fltk links against

Usage:
    python main.py                  # Run all checks
    python main.py --sequential     # Don't parallelise the library checks
    python main.py --list-libs      # List the libraries that will be checked
    python main.py --strict         # Exit with status 1 if anything failed
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from fltkcheck import __version__
from fltkcheck.config import get_settings
from fltkcheck.logging_setup import configure_logging
from fltkcheck.platform_profile import detect_profile
from fltkcheck.prober import Prober
from fltkcheck.reporter import ConsoleReporter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fltk-check",
        description="Check whether this environment can build fltk-rs",
    )
    parser.add_argument("--jobs", "-j", type=int, help="Parallel library checks (default: CPU count, max 8)")
    parser.add_argument("--sequential", action="store_true", help="Run library checks one at a time")
    parser.add_argument("--workdir", type=Path, help="Directory for the temporary probe files")
    parser.add_argument("--strict", action="store_true", help="Exit with status 1 if any check fails")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every command that is run")
    parser.add_argument("--list-libs", action="store_true", help="List the libraries checked on this host")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def list_libraries(reporter: ConsoleReporter) -> None:
    """Print the active platform profile."""
    profile = detect_profile()
    compiler = get_settings().cxx or profile.compiler
    reporter.info(f"Platform: {profile.os_name} ({profile.compiler_family.value}, compiler: {compiler})")
    for library in profile.libraries:
        reporter.info(f"  {library}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    reporter = ConsoleReporter(color=not args.no_color)

    if args.list_libs:
        list_libraries(reporter)
        return 0

    settings = get_settings()
    overrides = {}
    if args.workdir is not None:
        overrides["workdir"] = args.workdir
    if args.sequential:
        overrides["jobs"] = 1
    elif args.jobs is not None:
        overrides["jobs"] = args.jobs
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    if not settings.workdir.is_dir():
        reporter.bad(f"Working directory {settings.workdir} does not exist")
        return 1 if args.strict else 0

    report = Prober(settings=settings, reporter=reporter).run()

    if report.residual_files:
        reporter.warn(f"Could not remove: {', '.join(report.residual_files)}")

    # Failures are advisory unless --strict is given
    if args.strict and not report.ok:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
