from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_input",
    "parse_failed",
    "config_invalid",
    "template_missing",
    "render_failed",
    "git_failed",
    "git_dirty",
    "io_failed",
    "build_failed",
    "publish_failed",
    "workshop_failed",
    "forum_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    Steps translate git, process and config errors into this shape so the CLI
    can render them and pick an exit code without knowing their origin.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
