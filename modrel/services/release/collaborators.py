"""External collaborators of the release pipeline.

Steps only see these protocols; ``gh``, the workshop uploader, the forum
updater and the build command each have a subprocess-backed implementation
in this package, and tests pass fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from modrel.core.result import Result
from modrel.git.repository import GitError
from modrel.services.release.errors import ReleaseError


class SourceControl(Protocol):
    def exists(self) -> bool: ...

    def porcelain(self) -> Result[str, GitError]: ...

    def current_branch(self) -> Result[str, GitError]: ...

    def unpushed_commits(self, branch: str) -> Result[str, GitError]: ...

    def last_tag(self) -> Result[str | None, GitError]: ...

    def log_lines(self, *, since: str | None, pretty: str) -> Result[list[str], GitError]: ...

    def reset_tags(self) -> Result[None, GitError]: ...

    def pull_tags(self) -> Result[None, GitError]: ...

    def authors(self) -> Result[list[str], GitError]: ...

    def author_subjects(self, author: str) -> Result[list[str], GitError]: ...

    def version_branches(self) -> Result[list[str], GitError]: ...

    def origin_url(self) -> Result[str, GitError]: ...

    def set_origin_url(self, url: str) -> Result[None, GitError]: ...

    def commit_all(self, message: str) -> Result[str, GitError]: ...

    def push(self) -> Result[str, GitError]: ...


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    repo_slug: str
    tag: str
    title: str
    body: str
    asset: Path | None = None
    asset_label: str | None = None
    draft: bool = False
    prerelease: bool = False


class ReleasePublisher(Protocol):
    def create_release(self, request: ReleaseRequest) -> Result[str, ReleaseError]:
        """Create the release; returns its URL."""
        ...


class WorkshopUploader(Protocol):
    def upload(
        self, *, source_dir: Path, changenote: str, description: str
    ) -> Result[None, ReleaseError]: ...


@dataclass(frozen=True, slots=True)
class ForumPost:
    body: str
    title: str | None = None


class ForumUpdater(Protocol):
    def update(self, post: ForumPost) -> Result[None, ReleaseError]: ...


class BuildRunner(Protocol):
    def build(self, *, source_dir: Path) -> Result[None, ReleaseError]: ...
