from __future__ import annotations

from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import run_silent
from modrel.services.release.errors import ReleaseError


class CommandBuildRunner:
    """Runs the configured build command in the mod directory."""

    def __init__(self, command: tuple[str, ...]) -> None:
        self._command = command

    def build(self, *, source_dir: Path) -> Result[None, ReleaseError]:
        if not self._command:
            return Err(ReleaseError(kind="config_invalid", message="no build command configured"))

        result = run_silent(list(self._command), cwd=source_dir)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"build failed (exit {e.returncode})",
                    hint=e.stderr.strip() or None,
                )
            )
        return Ok(None)
