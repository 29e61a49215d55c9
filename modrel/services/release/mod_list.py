"""The mod list shown in the forum thread.

Every directory under the configured mods directory is one mod. Its entry
merges ``About.xml`` with the mod descriptor, the descriptor winning where
both have a value.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path

from modrel.core.config import PathsConfig
from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol
from modrel.services.release.descriptor import read_descriptor
from modrel.services.release.errors import ReleaseError

_CLAUSE_END_RE = re.compile(r"[.;:,\n]")
_MARKUP_RE = re.compile(r"<[^>]+>")


def tagline(description: str) -> str:
    """First clause of a description, with rich text tags removed."""
    text = _MARKUP_RE.sub("", description).strip()
    return _CLAUSE_END_RE.split(text, maxsplit=1)[0].strip()


def last_update(mtime: float) -> str:
    """Local date as month and ordinal day, e.g. ``May 3rd``."""
    when = datetime.fromtimestamp(mtime)
    day = when.day
    suffix = "th" if 11 <= day <= 13 else {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{when:%b} {day}{suffix}"


def _mod_entry(
    mod_dir: Path, *, paths: PathsConfig, author: str, console: ConsoleProtocol
) -> Result[dict[str, object] | None, ReleaseError]:
    about_path = mod_dir / paths.about
    if not about_path.is_file():
        console.warning(f"skipped {mod_dir.name}: no {paths.about}")
        return Ok(None)
    try:
        root = ET.parse(about_path).getroot()
        mtime = about_path.stat().st_mtime
    except (ET.ParseError, OSError) as e:
        return Err(
            ReleaseError(
                kind="parse_failed", message=f"failed to read {about_path}: {e}", hint=str(mod_dir)
            )
        )

    about_name = (root.findtext("name") or "").strip() or mod_dir.name
    loaded = read_descriptor(
        mod_dir / paths.descriptor,
        author=author,
        fallback_name=about_name,
        alpha=None,
        console=console,
    )
    if isinstance(loaded, Err):
        return loaded
    descriptor = loaded.value

    description = root.findtext("description") or ""
    supported = [li.text.strip() for li in root.iterfind("supportedVersions/li") if li.text]
    entry: dict[str, object] = {
        "name": about_name,
        "package_id": root.findtext("packageId"),
        "author": root.findtext("author"),
        "url": root.findtext("url"),
        "description": description,
        "tagline": tagline(description),
        "target_version": ", ".join(supported),
        "last_update": last_update(mtime),
        "version": None,
        "published_file_id": None,
        "repo_url": None,
        "tags": [],
    }
    if descriptor is not None:
        entry.update(
            name=descriptor.name,
            package_id=descriptor.package_id,
            version=str(descriptor.version),
            published_file_id=descriptor.published_file_id,
            repo_url=(
                f"https://github.com/{descriptor.repo_slug}" if descriptor.repo_slug else None
            ),
            tags=list(descriptor.tags),
        )
    return Ok(entry)


def mod_entries(
    mods_dir: Path, *, paths: PathsConfig, author: str, console: ConsoleProtocol
) -> Result[list[dict[str, object]], ReleaseError]:
    """One entry per mod directory, in directory name order.

    Directories without an ``About.xml`` are skipped with a warning; an
    unreadable ``About.xml`` fails the whole list.
    """
    try:
        mod_dirs = sorted(
            p for p in mods_dir.iterdir() if p.is_dir() and not p.name.startswith(".")
        )
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to list mods: {e}",
                hint=str(mods_dir),
            )
        )

    entries: list[dict[str, object]] = []
    for mod_dir in mod_dirs:
        entry = _mod_entry(mod_dir, paths=paths, author=author, console=console)
        if isinstance(entry, Err):
            return entry
        if entry.value is not None:
            entries.append(entry.value)
    return Ok(entries)
