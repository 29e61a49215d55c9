from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Directive = Literal["major", "standard", "none"]
Dialect = Literal["plain", "restricted", "forum"]

DIALECTS: tuple[Dialect, ...] = ("plain", "restricted", "forum")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """``major.minor.build``, ordered as a triple.

    ``alpha`` is the game's alpha/epoch marker; it travels with the version
    but takes no part in ordering.
    """

    major: int = 0
    minor: int = 0
    build: int = 0
    alpha: int | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}"

    def to_tag(self) -> str:
        return f"v{self}"

    @property
    def triple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.build)


@dataclass(frozen=True, slots=True)
class ChangeNote:
    """One commit worth mentioning; ``hash`` identifies it across runs."""

    hash: str
    date: str  # YYYY-MM-DD
    author: str
    message: str
    repo: str | None = None


def _empty_contributors() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class ModDescriptor:
    """The mod being released (persisted as ModConfig.json)."""

    name: str
    package_id: str
    version: Version = field(default_factory=Version)
    contributors: dict[str, str] = field(default_factory=_empty_contributors)
    tags: tuple[str, ...] = ()
    git_user: str | None = None
    git_repo: str | None = None
    visibility: int = 0
    published_file_id: str | None = None
    # Notes of the release being prepared, refreshed every run.
    changenote: str = ""
    changenotes: tuple[ChangeNote, ...] = ()

    @property
    def repo_slug(self) -> str | None:
        if self.git_user and self.git_repo:
            return f"{self.git_user}/{self.git_repo}"
        return None
