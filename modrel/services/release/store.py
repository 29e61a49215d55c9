"""Persistent change note store.

The store is the long-lived record of change notes across all releases
(``changenotes.json``), newest first. It only grows: a note is added once per
commit hash, and ``[nolog]`` notes never get in.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.core.structured import as_obj_list, as_str_dict, get_str
from modrel.output.console import ConsoleProtocol
from modrel.services.release.changenotes import is_nolog
from modrel.services.release.errors import ReleaseError
from modrel.services.release.jsonfile import write_json
from modrel.services.release.model import ChangeNote

ChangeNoteStore = tuple[ChangeNote, ...]


def merge(existing: Sequence[ChangeNote], incoming: Iterable[ChangeNote]) -> ChangeNoteStore:
    """Add unseen notes and re-sort by date, newest first.

    The sort is stable, so notes sharing a date keep their relative order.
    """
    notes = list(existing)
    seen = {n.hash for n in notes}
    for note in incoming:
        if note.hash in seen or is_nolog(note.message):
            continue
        seen.add(note.hash)
        notes.append(note)
    notes.sort(key=lambda n: n.date, reverse=True)
    return tuple(notes)


def _note_from_obj(obj: object) -> ChangeNote | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    commit_hash = get_str(data, "hash")
    date = get_str(data, "date")
    message = get_str(data, "message")
    if commit_hash is None or date is None or message is None:
        return None
    return ChangeNote(
        hash=commit_hash,
        date=date,
        author=get_str(data, "author") or "",
        message=message,
        repo=get_str(data, "repo"),
    )


def note_to_dict(note: ChangeNote) -> dict[str, object]:
    return {
        "repo": note.repo,
        "hash": note.hash,
        "date": note.date,
        "author": note.author,
        "message": note.message,
    }


def notes_from_list(obj: object) -> ChangeNoteStore:
    """Read notes from a JSON list, skipping malformed entries."""
    items = as_obj_list(obj) or []
    notes = (_note_from_obj(item) for item in items)
    return tuple(n for n in notes if n is not None)


def load_store(path: Path, *, console: ConsoleProtocol) -> ChangeNoteStore:
    """Read the store; a missing or unreadable file is an empty store."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        console.warning(f"no change note store at {path}, starting empty")
        return ()
    except OSError as e:
        console.warning(f"failed to read change note store: {e}")
        return ()

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        console.warning(f"invalid JSON in change note store ({path}): {e}")
        return ()

    if as_obj_list(obj) is None:
        console.warning(f"change note store is not a list: {path}")
        return ()
    return notes_from_list(obj)


def save_store(path: Path, notes: Sequence[ChangeNote]) -> Result[None, ReleaseError]:
    return write_json(path, [note_to_dict(n) for n in notes], what="change note store")


def update_store(
    path: Path, incoming: Iterable[ChangeNote], *, console: ConsoleProtocol
) -> Result[ChangeNoteStore, ReleaseError]:
    """Load, merge ``incoming`` and write the store back."""
    merged = merge(load_store(path, console=console), incoming)
    saved = save_store(path, merged)
    if isinstance(saved, Err):
        return saved
    return Ok(merged)
