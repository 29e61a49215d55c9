"""Tests for the document model and the dialect printers."""

from __future__ import annotations

from modrel.services.release.document import (
    Heading,
    LineBreak,
    ListBlock,
    Paragraph,
    Strong,
    Text,
    parse_document,
)
from modrel.services.release.markup import print_forum, print_restricted


def restricted(md: str) -> str:
    return print_restricted(parse_document(md))


def forum(md: str) -> str:
    return print_forum(parse_document(md))


class TestParseDocument:
    def test_heading_and_paragraph(self) -> None:
        doc = parse_document("# Title\n\nBody **bold**")
        assert doc.blocks[0] == Heading(level=1, children=(Text("Title"),))
        para = doc.blocks[1]
        assert isinstance(para, Paragraph)
        assert Strong(children=(Text("bold"),)) in para.children

    def test_list(self) -> None:
        doc = parse_document("- a\n- b")
        lst = doc.blocks[0]
        assert isinstance(lst, ListBlock)
        assert lst.ordered is False
        assert len(lst.items) == 2

    def test_html_br_is_line_break(self) -> None:
        doc = parse_document("one<br>two")
        para = doc.blocks[0]
        assert isinstance(para, Paragraph)
        assert LineBreak() in para.children

    def test_empty(self) -> None:
        assert parse_document("").blocks == ()


class TestRestricted:
    def test_heading_then_body(self) -> None:
        assert restricted("# Title\n\nBody") == "<size=24>Title</size>\nBody\n"

    def test_no_residual_tags(self) -> None:
        out = restricted("# Title\n\nBody with [a link](http://x.org) and ![img](http://x.org/i.png)")
        assert out == "<size=24>Title</size>\nBody with a link and\n"

    def test_deeper_heading_is_bold(self) -> None:
        assert restricted("## Sub") == "<b>Sub</b>\n"

    def test_inline_styles(self) -> None:
        assert restricted("**bold** and *it*") == "<b>bold</b> and <i>it</i>\n"

    def test_ampersand_unescaped(self) -> None:
        assert restricted("Tom &amp; Jerry") == "Tom & Jerry\n"

    def test_paragraphs_and_list(self) -> None:
        assert restricted("one\n\ntwo\n\n- a\n- b") == "one\n\ntwo\n\na\nb\n"

    def test_html_stripped(self) -> None:
        assert "<" not in restricted('<div align="center">centered</div>')


class TestForum:
    def test_two_item_list(self) -> None:
        assert forum("- a\n- b") == " - a\n - b\n"

    def test_nested_list_flattened(self) -> None:
        out = forum("- a\n  - b\n- c")
        assert out == " - a\n - b\n - c\n"
        assert "[list]" not in out
        assert "[*]" not in out

    def test_headings(self) -> None:
        assert forum("# Title\n\nBody") == "[h1]Title[/h1]\nBody\n"
        assert forum("#### Deep") == "[b]Deep[/b]\n"

    def test_inline(self) -> None:
        assert forum("**b** *i* [site](http://x.org)") == (
            "[b]b[/b] [i]i[/i] [url=http://x.org]site[/url]\n"
        )

    def test_linked_image(self) -> None:
        out = forum("[![Game 1.4](http://img/b.svg)](http://game.org)")
        assert out == "[url=http://game.org][img]http://img/b.svg[/img][/url]\n"

    def test_blocks_separated_by_blank_line(self) -> None:
        assert forum("one\n\n---\n\ntwo") == "one\n\n[hr][/hr]\n\ntwo\n"

    def test_quote_and_code(self) -> None:
        assert forum("> quoted") == "[quote]quoted[/quote]\n"
        assert forum("```\ncode\n```") == "[code]\ncode\n[/code]\n"

    def test_no_runs_of_blank_lines(self) -> None:
        assert "\n\n\n" not in forum("# A\n\n\n\npara\n\n\n\n- x\n\n\n\n## B")
