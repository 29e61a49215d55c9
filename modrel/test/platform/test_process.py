"""Tests for modrel.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

from modrel.core.result import Err, Ok
from modrel.platform.process import ProcessError, run, run_silent


class TestRun:
    def test_captures_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_nonzero_exit(self, tmp_path: Path) -> None:
        cmd = [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        result = run(cmd, cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"
        assert result.error.detail == "bad"

    def test_missing_executable(self, tmp_path: Path) -> None:
        result = run(["modrel-definitely-not-a-command"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path) -> None:
        cmd = [sys.executable, "-c", "import time; time.sleep(5)"]
        result = run(cmd, cwd=tmp_path, timeout=0.2)
        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestRunSilent:
    def test_success(self, tmp_path: Path) -> None:
        assert isinstance(run_silent([sys.executable, "-c", "pass"], cwd=tmp_path), Ok)

    def test_failure(self, tmp_path: Path) -> None:
        result = run_silent([sys.executable, "-c", "raise SystemExit(2)"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 2


class TestProcessError:
    def test_str_truncates_command(self) -> None:
        error = ProcessError(command=("git", "log", "a", "b"), returncode=1, stdout="", stderr="")
        assert str(error) == "git log a ... failed (exit 1)"

    def test_detail_falls_back(self) -> None:
        error = ProcessError(command=("gh",), returncode=1, stdout="out", stderr=" ")
        assert error.detail == "out"
