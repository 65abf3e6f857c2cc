from __future__ import annotations

from pathlib import Path

import pytest

import main
from conftest import FakeHost
from fltkcheck.platform_profile import CompilerFamily, build_profile
from fltkcheck.prober import Prober


@pytest.fixture()
def fake_prober(monkeypatch: pytest.MonkeyPatch):
    """Route main() through a FakeHost on a Linux profile."""
    hosts: list[FakeHost] = []
    captured = {}

    def install(host: FakeHost) -> dict:
        hosts.append(host)

        def build(settings, reporter):
            captured["settings"] = settings
            return Prober(
                settings=settings,
                profile=build_profile("linux", CompilerFamily.POSIX),
                reporter=reporter,
                runner=host,
            )

        monkeypatch.setattr(main, "Prober", build)
        return captured

    return install


def test_failures_are_advisory_by_default(
    fake_prober, tmp_path: Path, capsys: pytest.CaptureFixture[str],
) -> None:
    fake_prober(FakeHost(missing={"cmake"}))
    assert main.main(["--workdir", str(tmp_path), "--no-color"]) == 0
    assert "cmake" in capsys.readouterr().out.lower()


def test_strict_mode_sets_exit_status(fake_prober, tmp_path: Path) -> None:
    fake_prober(FakeHost(missing_libraries={"GL"}))
    assert main.main(["--workdir", str(tmp_path), "--strict", "--no-color"]) == 1


def test_strict_mode_passes_on_healthy_host(fake_prober, tmp_path: Path) -> None:
    fake_prober(FakeHost(missing={"ninja"}))
    assert main.main(["--workdir", str(tmp_path), "--strict", "--no-color"]) == 0


def test_sequential_flag_overrides_jobs(fake_prober, tmp_path: Path) -> None:
    captured = fake_prober(FakeHost())
    main.main(["--workdir", str(tmp_path), "--jobs", "6", "--sequential", "--no-color"])
    assert captured["settings"].jobs == 1
    assert captured["settings"].workdir == tmp_path


def test_missing_workdir_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    missing = tmp_path / "nope"
    assert main.main(["--workdir", str(missing), "--no-color"]) == 0
    assert "does not exist" in capsys.readouterr().out


def test_list_libs(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(main, "detect_profile", lambda: build_profile("macos", CompilerFamily.POSIX))
    assert main.main(["--list-libs", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "Platform: macos" in out
    assert "Cocoa" in out


def test_residual_files_are_reported(
    fake_prober, tmp_path: Path, capsys: pytest.CaptureFixture[str],
) -> None:
    (tmp_path / "a.out").mkdir()
    (tmp_path / "a.out" / "keep").write_text("x")
    fake_prober(FakeHost())

    assert main.main(["--workdir", str(tmp_path), "--no-color"]) == 0
    assert "Could not remove: a.out" in capsys.readouterr().out


def test_list_libs_shows_compiler_override(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("FLTKCHECK_CXX", "clang++")
    monkeypatch.setattr(main, "detect_profile", lambda: build_profile("linux", CompilerFamily.POSIX))
    assert main.main(["--list-libs", "--no-color"]) == 0
    assert "compiler: clang++" in capsys.readouterr().out
