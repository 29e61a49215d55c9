"""Generic document model for description markdown.

The canonical description is parsed once (with mistune) into the small set of
blocks and spans the target dialects can express. Dialect printers in
``modrel.services.release.markup`` walk this model; nothing downstream sees
HTML or the mistune AST.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import mistune

__all__ = [
    "Block",
    "CodeBlock",
    "Code",
    "Document",
    "Emphasis",
    "Heading",
    "Image",
    "Inline",
    "LineBreak",
    "Link",
    "ListBlock",
    "ListItem",
    "Paragraph",
    "Quote",
    "Rule",
    "Strong",
    "Text",
    "parse_document",
]

_TAG_RE = re.compile(r"<[^>]*>")
_BR_RE = re.compile(r"^<br\s*/?>$", re.IGNORECASE)


# Inline spans


@dataclass(frozen=True, slots=True)
class Text:
    text: str


@dataclass(frozen=True, slots=True)
class Strong:
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Emphasis:
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Code:
    text: str


@dataclass(frozen=True, slots=True)
class Link:
    url: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Image:
    url: str
    alt: str


@dataclass(frozen=True, slots=True)
class LineBreak:
    hard: bool = True


type Inline = Text | Strong | Emphasis | Code | Link | Image | LineBreak


# Blocks


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Paragraph:
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class ListItem:
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListBlock:
    ordered: bool
    items: tuple[ListItem, ...]


@dataclass(frozen=True, slots=True)
class Quote:
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class CodeBlock:
    text: str
    info: str | None = None


@dataclass(frozen=True, slots=True)
class Rule:
    pass


type Block = Heading | Paragraph | ListBlock | Quote | CodeBlock | Rule


@dataclass(frozen=True, slots=True)
class Document:
    blocks: tuple[Block, ...]


_markdown = mistune.create_markdown(renderer="ast")


def _attrs(token: Mapping[str, object]) -> Mapping[str, object]:
    attrs = token.get("attrs")
    if isinstance(attrs, Mapping):
        return attrs  # type: ignore[return-value]
    return {}


def _children(token: Mapping[str, object]) -> list[Mapping[str, object]]:
    children = token.get("children")
    if not isinstance(children, list):
        return []
    return [c for c in children if isinstance(c, Mapping)]  # type: ignore[misc]


def _raw(token: Mapping[str, object]) -> str:
    raw = token.get("raw")
    return raw if isinstance(raw, str) else ""


def _plain_text(tokens: Iterable[Mapping[str, object]]) -> str:
    parts: list[str] = []
    for tok in tokens:
        parts.append(_raw(tok))
        parts.append(_plain_text(_children(tok)))
    return "".join(parts)


def _inlines(tokens: Iterable[Mapping[str, object]]) -> tuple[Inline, ...]:
    out: list[Inline] = []
    for tok in tokens:
        match tok.get("type"):
            case "text":
                out.append(Text(_raw(tok)))
            case "strong":
                out.append(Strong(_inlines(_children(tok))))
            case "emphasis":
                out.append(Emphasis(_inlines(_children(tok))))
            case "codespan":
                out.append(Code(_raw(tok)))
            case "link":
                out.append(Link(str(_attrs(tok).get("url", "")), _inlines(_children(tok))))
            case "image":
                out.append(Image(str(_attrs(tok).get("url", "")), _plain_text(_children(tok))))
            case "softbreak":
                out.append(LineBreak(hard=False))
            case "linebreak":
                out.append(LineBreak())
            case "inline_html":
                raw = _raw(tok).strip()
                if _BR_RE.match(raw):
                    out.append(LineBreak())
                elif stripped := _TAG_RE.sub("", raw):
                    out.append(Text(stripped))
            case _:
                children = _children(tok)
                if children:
                    out.extend(_inlines(children))
                elif raw := _raw(tok):
                    out.append(Text(raw))
    return tuple(out)


def _blocks(tokens: Iterable[Mapping[str, object]]) -> tuple[Block, ...]:
    out: list[Block] = []
    for tok in tokens:
        match tok.get("type"):
            case "heading":
                level = _attrs(tok).get("level")
                out.append(
                    Heading(level if isinstance(level, int) else 1, _inlines(_children(tok)))
                )
            case "paragraph" | "block_text":
                out.append(Paragraph(_inlines(_children(tok))))
            case "list":
                items = tuple(
                    ListItem(_blocks(_children(item)))
                    for item in _children(tok)
                    if item.get("type") == "list_item"
                )
                out.append(ListBlock(ordered=bool(_attrs(tok).get("ordered")), items=items))
            case "block_quote":
                out.append(Quote(_blocks(_children(tok))))
            case "block_code":
                info = _attrs(tok).get("info")
                out.append(
                    CodeBlock(_raw(tok).rstrip("\n"), info if isinstance(info, str) else None)
                )
            case "thematic_break":
                out.append(Rule())
            case "block_html":
                text = _TAG_RE.sub("", _raw(tok)).strip()
                if text:
                    out.append(Paragraph((Text(text),)))
            case "blank_line":
                continue
            case _:
                children = _children(tok)
                if children:
                    out.extend(_blocks(children))
                elif raw := _raw(tok).strip():
                    out.append(Paragraph((Text(raw),)))
    return tuple(out)


def parse_document(markdown: str) -> Document:
    """Parse markdown into a ``Document``."""
    tokens = _markdown(markdown)
    if not isinstance(tokens, list):
        return Document(blocks=())
    return Document(blocks=_blocks(t for t in tokens if isinstance(t, Mapping)))
