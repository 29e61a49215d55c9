"""Dialect printers over the generic document model.

- restricted: the in-game description field, which understands only
  ``<b>``, ``<i>`` and ``<size=N>``.
- forum: bulletin-board tags for the workshop page and the forum thread. The
  target has no list support, so lists (nested ones included) become
  `` - item`` lines.
"""

from __future__ import annotations

import html
import re

from modrel.services.release.document import (
    Block,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Image,
    Inline,
    LineBreak,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    Quote,
    Rule,
    Strong,
    Text,
)

__all__ = ["print_forum", "print_restricted", "RESTRICTED_HEADING_SIZE"]

RESTRICTED_HEADING_SIZE = 24

_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def _finish(text: str) -> str:
    text = text.rstrip()
    return text + "\n" if text else ""


# restricted


def _restricted_inline(spans: tuple[Inline, ...]) -> str:
    out: list[str] = []
    for span in spans:
        match span:
            case Text(text=text):
                out.append(text.replace("&amp;", "&"))
            case Strong(children=children):
                out.append(f"<b>{_restricted_inline(children)}</b>")
            case Emphasis(children=children):
                out.append(f"<i>{_restricted_inline(children)}</i>")
            case Code(text=text):
                out.append(text)
            case Link(children=children):
                out.append(_restricted_inline(children))
            case Image():
                pass
            case LineBreak():
                out.append("\n")
    return "".join(out)


def _restricted_block(block: Block) -> str:
    match block:
        case Heading(level=1, children=children):
            return f"<size={RESTRICTED_HEADING_SIZE}>{_restricted_inline(children)}</size>\n"
        case Heading(children=children):
            return f"<b>{_restricted_inline(children)}</b>\n"
        case Paragraph(children=children):
            return _restricted_inline(children) + "\n\n"
        case ListBlock(items=items):
            lines = "".join(_restricted_item(item) for item in items)
            return lines + "\n"
        case Quote(children=children):
            return "".join(_restricted_block(b) for b in children)
        case CodeBlock(text=text):
            return text + "\n\n"
        case Rule():
            return "\n"


def _restricted_item(item: ListItem) -> str:
    out: list[str] = []
    for block in item.children:
        match block:
            case Paragraph(children=children):
                out.append(_restricted_inline(children) + "\n")
            case ListBlock(items=items):
                out.extend(_restricted_item(i) for i in items)
            case _:
                out.append(_restricted_block(block))
    return "".join(out)


def print_restricted(doc: Document) -> str:
    """Render for the in-game description field.

    Level-1 headings are sized, deeper headings bold; paragraphs end in a bare
    newline; any other markup is reduced to its text.
    """
    return _finish("".join(_restricted_block(b) for b in doc.blocks))


# forum


def _forum_inline(spans: tuple[Inline, ...]) -> str:
    out: list[str] = []
    for span in spans:
        match span:
            case Text(text=text):
                out.append(html.unescape(text))
            case Strong(children=children):
                out.append(f"[b]{_forum_inline(children)}[/b]")
            case Emphasis(children=children):
                out.append(f"[i]{_forum_inline(children)}[/i]")
            case Code(text=text):
                out.append(text)
            case Link(url=url, children=children):
                out.append(f"[url={url}]{_forum_inline(children)}[/url]")
            case Image(url=url):
                out.append(f"[img]{url}[/img]")
            case LineBreak():
                out.append("\n")
    return "".join(out)


def _forum_item_lines(item: ListItem) -> list[str]:
    lines: list[str] = []
    text_parts: list[str] = []
    nested: list[str] = []
    for block in item.children:
        match block:
            case Paragraph(children=children):
                text_parts.append(_forum_inline(children))
            case ListBlock(items=items):
                for sub in items:
                    nested.extend(_forum_item_lines(sub))
            case _:
                text_parts.append(_forum_block(block).strip())
    lines.append(" - " + " ".join(p for p in text_parts if p))
    lines.extend(nested)
    return lines


def _forum_block(block: Block) -> str:
    match block:
        case Heading(level=level, children=children) if level <= 3:
            return f"[h{level}]{_forum_inline(children)}[/h{level}]\n"
        case Heading(children=children):
            return f"[b]{_forum_inline(children)}[/b]\n"
        case Paragraph(children=children):
            return _forum_inline(children) + "\n\n"
        case ListBlock(items=items):
            lines = [line for item in items for line in _forum_item_lines(item)]
            return "\n".join(lines) + "\n\n"
        case Quote(children=children):
            inner = "".join(_forum_block(b) for b in children).strip()
            return f"[quote]{inner}[/quote]\n\n"
        case CodeBlock(text=text):
            return f"[code]\n{text}\n[/code]\n\n"
        case Rule():
            return "[hr][/hr]\n\n"


def print_forum(doc: Document) -> str:
    """Render bulletin-board markup.

    Blocks are separated by a blank line, headings by a single newline, and
    runs of blank lines are collapsed to one.
    """
    text = "".join(_forum_block(b) for b in doc.blocks)
    return _finish(_EXTRA_NEWLINES_RE.sub("\n\n", text))
