"""Change notes from git history.

Commits since the last release tag become ``ChangeNote``s. The log is read
with ``LOG_FORMAT`` so each commit is one ``hash || timestamp || author ||
subject`` line; commits whose subject carries ``[nolog]`` (any case) are
never recorded.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from modrel.core.result import Err, Ok, Result
from modrel.git.repository import GitError
from modrel.services.release.errors import ReleaseError
from modrel.services.release.model import ChangeNote

LOG_DELIMITER = "||"
LOG_FORMAT = "%H || %cI || %aN || %s"
NOLOG_MARKER = "[nolog]"

_NOLOG_RE = re.compile(re.escape(NOLOG_MARKER), re.IGNORECASE)


class LogSource(Protocol):
    """The slice of the version-control collaborator the collector needs."""

    def last_tag(self) -> Result[str | None, GitError]: ...

    def log_lines(self, *, since: str | None, pretty: str) -> Result[list[str], GitError]: ...

    def reset_tags(self) -> Result[None, GitError]: ...


@dataclass(frozen=True, slots=True)
class Collection:
    notes: tuple[ChangeNote, ...]
    # Lines dropped because their timestamp could not be read.
    rejected: tuple[str, ...] = ()


def is_nolog(message: str) -> bool:
    return _NOLOG_RE.search(message) is not None


def _note_date(timestamp: str) -> str | None:
    try:
        return datetime.fromisoformat(timestamp).date().isoformat()
    except ValueError:
        return None


def collect(lines: Iterable[str], *, repo: str | None) -> Collection:
    """Turn raw log lines into change notes.

    Lines without exactly four fields, a hash or a message are skipped;
    lines with an unreadable timestamp are skipped and reported in
    ``rejected``. The timestamp keeps its own offset, so a commit made at
    23:30+02:00 is dated on its local day.
    """
    notes: list[ChangeNote] = []
    rejected: list[str] = []
    for line in lines:
        fields = [f.strip() for f in line.split(LOG_DELIMITER)]
        if len(fields) != 4:
            continue
        commit_hash, timestamp, author, message = fields
        if not commit_hash or not message:
            continue
        date = _note_date(timestamp)
        if date is None:
            rejected.append(line)
            continue
        if is_nolog(message):
            continue
        notes.append(
            ChangeNote(hash=commit_hash, date=date, author=author, message=message, repo=repo)
        )
    return Collection(notes=tuple(notes), rejected=tuple(rejected))


def collect_since_last_tag(
    source: LogSource, *, repo: str | None, reset_tags: bool = False
) -> Result[Collection, ReleaseError]:
    """Collect notes for commits after the most recent tag (all of HEAD if untagged)."""
    if reset_tags:
        reset = source.reset_tags()
        if isinstance(reset, Err):
            return Err(_git_error("failed to reset tags from origin", reset.error))

    tag = source.last_tag()
    if isinstance(tag, Err):
        return Err(_git_error("failed to read last tag", tag.error))

    lines = source.log_lines(since=tag.value, pretty=LOG_FORMAT)
    if isinstance(lines, Err):
        return Err(_git_error("failed to read git log", lines.error))

    return Ok(collect(lines.value, repo=repo))


def _git_error(message: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=message, hint=error.message)


def format_note(note: ChangeNote) -> str:
    """Store line used in the forum post: ``date :: repo :: author :: message``."""
    return f"{note.date} :: {note.repo or ''} :: {note.author} :: {note.message}"


def format_release_note(note: ChangeNote) -> str:
    """Release line (repo is implied): ``date :: author :: message``."""
    return f"{note.date} :: {note.author} :: {note.message}"


def changenote_text(notes: Sequence[ChangeNote]) -> str:
    """Change note for a release body or workshop update, one note per line."""
    return "\n".join(format_release_note(n) for n in notes if not is_nolog(n.message))
