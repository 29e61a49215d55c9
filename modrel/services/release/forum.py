from __future__ import annotations

import tempfile
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import run as run_process
from modrel.services.release.collaborators import ForumPost
from modrel.services.release.errors import ReleaseError
from modrel.services.release.timeouts import FORUM_TIMEOUT_SECONDS


class CommandForumUpdater:
    """Hands the post to the configured thread updater.

    Called as ``<updater> <post file> [<title>]``; credentials and the thread
    location are the updater's own business.
    """

    def __init__(self, updater: str, *, cwd: Path) -> None:
        self._updater = updater
        self._cwd = cwd

    def update(self, post: ForumPost) -> Result[None, ReleaseError]:
        with tempfile.TemporaryDirectory(prefix="modrel-forum-") as tmp:
            post_file = Path(tmp) / "post.bbcode"
            try:
                post_file.write_text(post.body, encoding="utf-8")
            except OSError as e:
                return Err(
                    ReleaseError(kind="io_failed", message=f"failed to write forum post: {e}")
                )
            cmd = [self._updater, str(post_file)]
            if post.title:
                cmd.append(post.title)
            result = run_process(cmd, cwd=self._cwd, timeout=FORUM_TIMEOUT_SECONDS)

        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="forum_failed",
                    message="forum post update failed",
                    hint=result.error.detail,
                )
            )
        return Ok(None)
