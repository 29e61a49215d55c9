from __future__ import annotations

import tempfile
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import run_silent
from modrel.services.release.errors import ReleaseError


class CommandWorkshopUploader:
    """Runs the configured workshop updater.

    The updater is called as ``<updater> <mod dir> <changenote file>
    <description file>``; both files are removed when it exits.
    """

    def __init__(self, updater: str) -> None:
        self._updater = updater

    def upload(
        self, *, source_dir: Path, changenote: str, description: str
    ) -> Result[None, ReleaseError]:
        with tempfile.TemporaryDirectory(prefix="modrel-workshop-") as tmp:
            changenote_file = Path(tmp) / "changenote.txt"
            description_file = Path(tmp) / "description.txt"
            try:
                changenote_file.write_text(changenote, encoding="utf-8")
                description_file.write_text(description, encoding="utf-8")
            except OSError as e:
                return Err(
                    ReleaseError(kind="io_failed", message=f"failed to write workshop files: {e}")
                )

            result = run_silent(
                [self._updater, str(source_dir), str(changenote_file), str(description_file)],
                cwd=source_dir,
            )

        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="workshop_failed",
                    message="workshop update failed",
                    hint=result.error.detail,
                )
            )
        return Ok(None)
