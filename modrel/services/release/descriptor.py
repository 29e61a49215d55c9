"""The mod descriptor (``Source/ModConfig.json``).

Layout on disk::

    {
        "name": "Colony Manager",
        "packageId": "fluffy.colonymanager",
        "version": {"alpha": 4, "major": 1, "minor": 2, "build": 7},
        "visibility": 0,
        "publishedfileid": "1234567890",
        "git_repo": "ColonyManager",
        "git_user": "fluffy-mods",
        "contributors": {"someone": "fixed the thing"},
        "changenote": "...",
        "changenotes": [...],
        "tags": ["1.3", "1.4"]
    }
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.core.structured import (
    as_str_dict,
    get_int,
    get_list,
    get_str,
    get_str_list,
    get_table,
)
from modrel.git.repository import GitError, parse_github_remote
from modrel.output.console import ConsoleProtocol
from modrel.services.release.collaborators import SourceControl
from modrel.services.release.errors import ReleaseError
from modrel.services.release.jsonfile import write_json
from modrel.services.release.model import ModDescriptor, Version
from modrel.services.release.store import note_to_dict, notes_from_list
from modrel.services.release.version import parse_version, version_to_dict

PACKAGE_ID_RE = re.compile(r"^[a-z]+(?:\.[a-z]+)+$", re.IGNORECASE)
_NON_WORD_RE = re.compile(r"\W")


def normalize_package_id(package_id: str | None, *, name: str, author: str) -> str:
    """Keep a well-formed ``author.name`` id, else derive one from author and name."""
    if package_id and PACKAGE_ID_RE.match(package_id):
        return package_id
    owner = _NON_WORD_RE.sub("", author).lower()
    return f"{owner}.{_NON_WORD_RE.sub('', name.strip()).lower()}"


def _contributors_from(obj: object) -> dict[str, str]:
    # Older descriptors store a plain list of names.
    if isinstance(obj, list):
        return {str(name): "" for name in obj if isinstance(name, str) and name.strip()}  # type: ignore[misc]
    data = as_str_dict(obj)
    if data is None:
        return {}
    return {k: v if isinstance(v, str) else "" for k, v in data.items()}


def descriptor_from_dict(
    data: Mapping[str, object], *, author: str, fallback_name: str, alpha: int | None = None
) -> ModDescriptor:
    name = get_str(data, "name") or fallback_name
    published = get_str(data, "publishedfileid")
    if published is None and (numeric := get_int(data, "publishedfileid")) is not None:
        published = str(numeric)
    changenote = data.get("changenote")
    return ModDescriptor(
        name=name,
        package_id=normalize_package_id(get_str(data, "packageId"), name=name, author=author),
        version=parse_version(get_table(data, "version"), alpha=alpha),
        contributors=_contributors_from(data.get("contributors")),
        tags=tuple(get_str_list(data, "tags") or ()),
        git_user=get_str(data, "git_user"),
        git_repo=get_str(data, "git_repo"),
        visibility=get_int(data, "visibility") or 0,
        published_file_id=published,
        changenote=changenote if isinstance(changenote, str) else "",
        changenotes=notes_from_list(get_list(data, "changenotes")),
    )


def descriptor_to_dict(descriptor: ModDescriptor) -> dict[str, object]:
    return {
        "name": descriptor.name,
        "packageId": descriptor.package_id,
        "version": version_to_dict(descriptor.version),
        "visibility": descriptor.visibility,
        "publishedfileid": descriptor.published_file_id,
        "git_repo": descriptor.git_repo,
        "git_user": descriptor.git_user,
        "contributors": dict(descriptor.contributors),
        "changenote": descriptor.changenote,
        "changenotes": [note_to_dict(n) for n in descriptor.changenotes],
        "tags": list(descriptor.tags),
    }


def read_descriptor(
    path: Path,
    *,
    author: str,
    fallback_name: str,
    alpha: int | None,
    console: ConsoleProtocol,
) -> Result[ModDescriptor | None, ReleaseError]:
    """Read the descriptor; Ok(None) when there is none (or it is unreadable JSON)."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Ok(None)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to read mod descriptor: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        console.warning(f"invalid JSON in {path}: {e}; recreating it")
        return Ok(None)

    data = as_str_dict(obj)
    if data is None:
        console.warning(f"{path} is not a JSON object; recreating it")
        return Ok(None)
    return Ok(descriptor_from_dict(data, author=author, fallback_name=fallback_name, alpha=alpha))


def write_descriptor(path: Path, descriptor: ModDescriptor) -> Result[None, ReleaseError]:
    return write_json(path, descriptor_to_dict(descriptor), what="mod descriptor")


def _git_failed(message: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=message, hint=error.message)


def refresh_contributors(
    existing: Mapping[str, str], git: SourceControl, *, author: str
) -> Result[dict[str, str], ReleaseError]:
    """Add commit authors not yet listed.

    New contributors get a rough summary: their commit subjects joined with
    ", ". The configured ``author`` is never listed and known entries are
    left alone.
    """
    contributors = dict(existing)
    authors = git.authors()
    if isinstance(authors, Err):
        return Err(_git_failed("failed to list contributors", authors.error))

    for name in authors.value:
        if name == author or name in contributors:
            continue
        subjects = git.author_subjects(name)
        if isinstance(subjects, Err):
            return Err(_git_failed(f"failed to read commits of {name}", subjects.error))
        contributors[name] = ", ".join(subjects.value)
    return Ok(contributors)


def read_published_file_id(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip() or None
    except OSError:
        return None


def new_descriptor(
    *,
    name: str,
    author: str,
    git: SourceControl,
    tags: tuple[str, ...],
    alpha: int | None,
    published_file_id: str | None,
    console: ConsoleProtocol,
) -> Result[ModDescriptor, ReleaseError]:
    """A fresh descriptor from repository metadata (version 0.0.0).

    Outside a git checkout there is no remote and no contributor list.
    """
    git_user: str | None = None
    git_repo: str | None = None
    contributors: dict[str, str] = {}
    if not git.exists():
        console.warning("not a git repository; remote and contributors left empty")
    else:
        match git.origin_url():
            case Ok(url):
                parsed = parse_github_remote(url)
                if parsed is None:
                    console.warning(f"origin is not a GitHub remote: {url}")
                else:
                    git_user, git_repo = parsed
            case Err(e):
                console.warning(f"no origin remote: {e.message}")

        refreshed = refresh_contributors({}, git, author=author)
        if isinstance(refreshed, Err):
            return refreshed
        contributors = refreshed.value

    return Ok(
        ModDescriptor(
            name=name,
            package_id=normalize_package_id(None, name=name, author=author),
            version=Version(alpha=alpha),
            contributors=contributors,
            tags=tags,
            git_user=git_user,
            git_repo=git_repo,
            published_file_id=published_file_id,
        )
    )
