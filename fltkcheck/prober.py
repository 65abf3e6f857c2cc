"""
fltk-check Prober — Core diagnostic engine.

Runs the fixed battery of checks that decide whether this machine can
build fltk-rs, printing each outcome as soon as it is known:

  1. Rust toolchain version
  2. git, CMake and (optionally) Ninja
  3. C++ compiler presence
  4. C++11 support (compile gate: later checks are skipped if it fails)
  5. One link check per system library of the platform profile

Usage:
    from fltkcheck.prober import Prober

    report = Prober().run()
    print(report)
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from fltkcheck.compilers import CompilerDriver, driver_for
from fltkcheck.config import Settings, get_settings
from fltkcheck.platform_profile import CompilerFamily, PlatformProfile, detect_profile
from fltkcheck.process import Runner, ToolRun, run_tool
from fltkcheck.reporter import ConsoleReporter
from fltkcheck.results import CheckResult, CheckStatus, ProbeReport
from fltkcheck.version_detector import detect_toolchain, is_supported

logger = logging.getLogger(__name__)

# Probe source; trailing return type needs C++11
TEST_SOURCE = "#include <cstdint>\nauto main() -> int {}"
SOURCE_NAME = "fltk_check_file.cpp"


class Prober:
    """Runs the environment checks against one host.

    Args:
        settings: Runtime settings; defaults to get_settings().
        profile: Platform profile; detected from the host if omitted.
        reporter: Output sink; a colour console on stdout if omitted.
        runner: Command runner (run_tool, or a fake in tests).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        profile: Optional[PlatformProfile] = None,
        reporter: Optional[ConsoleReporter] = None,
        runner: Runner = run_tool,
    ):
        self.settings = settings or get_settings()
        self.runner = runner
        self.profile = profile or detect_profile(runner)
        self.reporter = reporter or ConsoleReporter()
        self.driver: CompilerDriver = driver_for(self.profile, self.settings.cxx)

    @property
    def workdir(self) -> Path:
        return self.settings.workdir

    def _run(self, args: list[str]) -> ToolRun:
        return self.runner(args, cwd=self.workdir, timeout=self.settings.timeout)

    def _record(self, report: ProbeReport, name: str, status: CheckStatus, message: str) -> CheckResult:
        result = CheckResult(name=name, status=status, message=message)
        self.reporter.report(status, message)
        report.add(result)
        return result

    # =========================================================================
    # Individual checks
    # =========================================================================

    def _banner(self) -> None:
        self.reporter.info("Checking whether this env can build fltk-rs..")
        if self.profile.is_windows:
            if self.profile.compiler_family is CompilerFamily.POSIX:
                self.reporter.info("This is testing a posix environment on Windows")
            else:
                self.reporter.info("This is testing an MSVC environment on Windows")

    def check_toolchain(self, report: ProbeReport) -> CheckResult:
        """Rust must be 1.x with x >= 46."""
        version, raw = detect_toolchain(
            self.settings.rustc,
            cwd=self.workdir,
            runner=self.runner,
            timeout=self.settings.timeout,
        )
        if version is None:
            first_line = raw.strip().splitlines()[0] if raw.strip() else "no output"
            logger.warning("unrecognised rustc version output: %s", first_line)
            return self._record(
                report, "toolchain", CheckStatus.FAIL,
                f"Could not determine the Rust version ({first_line}); "
                "you need Rust version 1.46 or higher!",
            )
        if is_supported(version):
            return self._record(
                report, "toolchain", CheckStatus.PASS,
                f"Found suitable Rust version for host {version.host}!",
            )
        return self._record(
            report, "toolchain", CheckStatus.FAIL,
            "You need Rust version 1.46 or higher!",
        )

    def check_tool(
        self,
        report: ProbeReport,
        name: str,
        executable: str,
        label: str,
        optional: bool = False,
    ) -> CheckResult:
        """Run `<executable> --version`; missing optional tools only warn."""
        run = self._run([executable, "--version"])
        if run.succeeded:
            return self._record(report, name, CheckStatus.PASS, f"Found working {label} executable!")
        status = CheckStatus.WARN if optional else CheckStatus.FAIL
        return self._record(report, name, status, f"{label} is not installed or not in PATH")

    def check_compiler(self, report: ProbeReport) -> CheckResult:
        run = self._run(self.driver.version_args())
        if self.driver.is_present(run):
            return self._record(report, "compiler", CheckStatus.PASS, "Found a C++ compiler!")
        return self._record(report, "compiler", CheckStatus.FAIL, "A C++ compiler wasn't found")

    def check_cxx11(self, report: ProbeReport) -> CheckResult:
        """Compile the probe source with the compiler's default flags."""
        run = self._run(self.driver.compile_args(SOURCE_NAME))
        if run.succeeded:
            return self._record(report, "cxx11", CheckStatus.PASS, "Found C++ compiler supporting C++11!")
        logger.debug("C++11 probe failed: %s", (run.stderr or run.stdout).strip())
        return self._record(report, "cxx11", CheckStatus.FAIL, "C++ compiler doesn't support C++11!")

    def check_library(self, library: str) -> CheckResult:
        """Link the probe source against one library. Safe to call from worker threads."""
        run = self._run(self.driver.link_args(SOURCE_NAME, library))
        outcome = self.driver.evaluate(run)
        if outcome.succeeded:
            result = CheckResult(f"lib:{library}", CheckStatus.PASS, f"Found library: {library}!")
        else:
            logger.debug("linking %s failed: %s", library, outcome.diagnostic)
            result = CheckResult(f"lib:{library}", CheckStatus.FAIL, f"Library {library} was not found!")
        self.reporter.report(result.status, result.message)
        return result

    def check_libraries(self, report: ProbeReport) -> list[CheckResult]:
        """Run all library checks, in parallel when more than one job is allowed.

        Lines are printed in completion order; the report lists results in
        profile order regardless of scheduling.
        """
        libraries = self.profile.libraries
        if self.settings.jobs <= 1 or len(libraries) <= 1:
            results = [self.check_library(lib) for lib in libraries]
        else:
            by_library: dict[str, CheckResult] = {}
            with ThreadPoolExecutor(max_workers=self.settings.jobs) as pool:
                futures = {pool.submit(self.check_library, lib): lib for lib in libraries}
                for future in as_completed(futures):
                    by_library[futures[future]] = future.result()
            results = [by_library[lib] for lib in libraries]

        for result in results:
            report.add(result)
        return results

    # =========================================================================
    # Working files
    # =========================================================================

    def artifacts(self) -> list[str]:
        """Every file a run may leave in the working directory."""
        names = [SOURCE_NAME, *self.driver.default_artifacts(SOURCE_NAME)]
        for library in self.profile.libraries:
            names.extend(self.driver.library_artifacts(library))
        return names

    def _write_source(self) -> None:
        path = self.workdir / SOURCE_NAME
        path.unlink(missing_ok=True)
        path.write_text(TEST_SOURCE)

    def cleanup(self) -> list[str]:
        """Delete generated files.

        Returns:
            Names of artifacts that could not be removed.
        """
        residual = []
        for name in self.artifacts():
            path = self.workdir / name
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("could not remove %s: %s", path, e)
                residual.append(name)
            else:
                logger.debug("removed %s", path)
        return residual

    # =========================================================================
    # Entry point
    # =========================================================================

    def run(self) -> ProbeReport:
        """Run every check and return the collected results."""
        report = ProbeReport()
        self._banner()

        self.check_toolchain(report)
        self.check_tool(report, "git", self.settings.git, "git")
        self.check_tool(report, "cmake", self.settings.cmake, "CMake")
        self.check_tool(report, "ninja", self.settings.ninja, "Ninja", optional=True)
        self.check_compiler(report)

        try:
            try:
                self._write_source()
            except OSError as e:
                self._record(
                    report, "cxx11", CheckStatus.FAIL,
                    f"Could not write {SOURCE_NAME} in {self.workdir}: {e}",
                )
                report.aborted = True
                return report

            if self.check_cxx11(report).status is CheckStatus.FAIL:
                report.aborted = True
                return report

            self.check_libraries(report)
        finally:
            report.residual_files = self.cleanup()

        return report
