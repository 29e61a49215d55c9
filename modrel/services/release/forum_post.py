"""Forum thread post.

The post is a rendered body followed by as many recent change notes as the
forum's post size limit allows. Notes are taken newest first and the list
stops at the first note that does not fit, so the post always shows an
unbroken run of the latest changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from modrel.core.result import Err, Ok, Result
from modrel.services.release.changenotes import format_note
from modrel.services.release.errors import ReleaseError
from modrel.services.release.expression import render_template
from modrel.services.release.model import ChangeNote
from modrel.services.release.store import merge

# Body length past which no change note section is added at all.
NO_NOTES_MARGIN = 1000
# Room kept free below the limit for the section wrapper and forum overhead.
NOTES_MARGIN = 500

SECTION_HEADER = "\n\nChangenotes:\n[code]\n"
SECTION_FOOTER = "\n[/code]"


def compose(
    existing: Sequence[ChangeNote],
    new_notes: Iterable[ChangeNote],
    body: str,
    max_bytes: int,
) -> str:
    """Append the change note section to ``body`` within ``max_bytes``.

    ``new_notes`` are merged into ``existing`` first. A body within
    ``NO_NOTES_MARGIN`` of the limit is returned unchanged.
    """
    notes = merge(existing, new_notes)
    if len(body) >= max_bytes - NO_NOTES_MARGIN:
        return body

    available = max_bytes - NOTES_MARGIN - len(body)
    acc = ""
    for note in notes:
        line = format_note(note)
        if len(acc) + len(line) > available:
            break
        acc += line + "\n"
    return body + SECTION_HEADER + acc + SECTION_FOOTER


def forum_title(prefix: str, custom: str | None) -> str | None:
    """Thread title for this update, or None to leave the title alone."""
    if not custom:
        return None
    return prefix + custom


def forum_body(
    *, template: str | None, scope: Mapping[str, object] | None, description: str
) -> Result[str, ReleaseError]:
    """Post body: the forum template rendered over ``scope``, or ``description``.

    The template is Jinja2; ``mods`` in the scope holds the thread's mod list.
    """
    if template is None:
        return Ok(description)
    rendered = render_template(template, scope or {}, name="forum")
    if isinstance(rendered, Err):
        return Err(
            ReleaseError(kind="render_failed", message=f"forum template: {rendered.error}")
        )
    return Ok(rendered.value)
