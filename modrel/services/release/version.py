from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from modrel.core.structured import get_int
from modrel.services.release.model import Directive, Version


def bump(current: Version, directive: Directive, *, no_bump: bool = False) -> Version:
    """Next version for ``directive``.

    The build number grows on every bump, including major ones; a major bump
    resets only the minor number. ``no_bump`` returns ``current`` unchanged.
    Calling this twice bumps twice: the pipeline runs it once per release.
    """
    if no_bump:
        return current
    match directive:
        case "major":
            return Version(current.major + 1, 0, current.build + 1, alpha=current.alpha)
        case "standard":
            return Version(current.major, current.minor + 1, current.build + 1, alpha=current.alpha)
        case "none":
            return Version(current.major, current.minor, current.build + 1, alpha=current.alpha)
        case _:
            raise AssertionError(f"unexpected bump directive: {directive}")


def directive_for(*, release: bool, major: bool) -> Directive:
    if major:
        return "major"
    return "standard" if release else "none"


def parse_version(data: Mapping[str, object] | None, *, alpha: int | None = None) -> Version:
    """Read a persisted ``{alpha, major, minor, build}`` object.

    Missing or invalid numbers read as 0; ``alpha`` is the fallback marker
    for descriptors written before it was recorded.
    """
    if data is None:
        return Version(alpha=alpha)

    def part(key: str) -> int:
        value = get_int(data, key)
        return value if value is not None and value >= 0 else 0

    stored_alpha = get_int(data, "alpha")
    return Version(
        part("major"),
        part("minor"),
        part("build"),
        alpha=stored_alpha if stored_alpha is not None else alpha,
    )


def version_to_dict(version: Version) -> dict[str, object]:
    return {
        "alpha": version.alpha,
        "major": version.major,
        "minor": version.minor,
        "build": version.build,
    }


GamePart = Literal["full", "main", "alpha"]


def game_version(raw: str, part: GamePart = "full") -> str:
    """Pick a part of the game's version string.

    ``raw`` is what the game ships, e.g. ``1.4.3641 rev1003``: ``full`` is
    ``1.4.3641``, ``main`` is ``1.4`` and ``alpha`` is ``4``.
    """
    tokens = raw.strip().split()
    full = tokens[0] if tokens else ""
    pieces = full.split(".")
    match part:
        case "full":
            return full
        case "main":
            return ".".join(pieces[:2])
        case "alpha":
            return pieces[1] if len(pieces) > 1 else ""
