from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import run as run_process
from modrel.services.release.collaborators import ReleaseRequest
from modrel.services.release.errors import ReleaseError
from modrel.services.release.timeouts import GH_TIMEOUT_SECONDS


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="publish_failed",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def release_create_cmd(request: ReleaseRequest, *, notes_file: Path) -> list[str]:
    cmd = [
        "gh",
        "release",
        "create",
        request.tag,
        "--repo",
        request.repo_slug,
        "--title",
        request.title,
        "--notes-file",
        str(notes_file),
    ]
    if request.draft:
        cmd.append("--draft")
    if request.prerelease:
        cmd.append("--prerelease")
    if request.asset is not None:
        label = request.asset_label or request.asset.name
        cmd.append(f"{request.asset}#{label}")
    return cmd


class GhReleasePublisher:
    """Creates GitHub releases with the ``gh`` CLI."""

    def __init__(self, *, cwd: Path) -> None:
        self._cwd = cwd

    def create_release(self, request: ReleaseRequest) -> Result[str, ReleaseError]:
        available = ensure_gh_available()
        if isinstance(available, Err):
            return available

        with tempfile.TemporaryDirectory(prefix="modrel-gh-") as tmp:
            notes_file = Path(tmp) / "notes.md"
            try:
                notes_file.write_text(request.body, encoding="utf-8")
            except OSError as e:
                return Err(
                    ReleaseError(kind="io_failed", message=f"failed to write release notes: {e}")
                )
            result = run_process(
                release_create_cmd(request, notes_file=notes_file),
                cwd=self._cwd,
                timeout=GH_TIMEOUT_SECONDS,
            )

        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"failed to create release {request.tag}",
                    hint=e.stderr.strip() or None,
                )
            )
        return Ok(result.value.strip())
