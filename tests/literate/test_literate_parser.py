"""Tests for litweave.literate.parser."""

from __future__ import annotations

from litweave.literate.parser import LiterateParser
from litweave.models import CodeChunk, MarkdownChunk


def test_parser_splits_comment_and_code_lines() -> None:
    chunks = LiterateParser().parse("# hello\n1+1\n")
    assert chunks == [MarkdownChunk(lines=["hello"]), CodeChunk(lines=["1+1"])]


def test_parser_keeps_bare_hash_as_blank_prose_line() -> None:
    chunks = LiterateParser().parse("# first\n#\n# second\n")
    assert chunks == [MarkdownChunk(lines=["first", "", "second"])]


def test_parser_treats_double_hash_as_code_comment() -> None:
    chunks = LiterateParser().parse("x = 1\n## keep me in the code\ny = 2\n")
    assert chunks == [CodeChunk(lines=["x = 1", "# keep me in the code", "y = 2"])]


def test_parser_indented_comment_stays_code() -> None:
    source = "def f():\n    # not prose\n    return 1\n"
    chunks = LiterateParser().parse(source)
    assert len(chunks) == 1
    assert isinstance(chunks[0], CodeChunk)
    assert chunks[0].lines[1] == "    # not prose"


def test_parser_separator_splits_code_blocks() -> None:
    chunks = LiterateParser().parse("a = 1\n#-\nb = 2\n")
    assert chunks == [CodeChunk(lines=["a = 1"]), CodeChunk(lines=["b = 2"])]


def test_parser_trims_blank_lines_and_drops_empty_code() -> None:
    source = "# a\n\n\n# b\n\n\nx = 1\n\n\n"
    chunks = LiterateParser().parse(source)
    assert chunks == [
        MarkdownChunk(lines=["a"]),
        MarkdownChunk(lines=["b"]),
        CodeChunk(lines=["x = 1"]),
    ]


def test_parser_keeps_blank_lines_inside_code() -> None:
    chunks = LiterateParser().parse("def f():\n    pass\n\nf()\n")
    assert chunks == [CodeChunk(lines=["def f():", "    pass", "", "f()"])]


def test_parser_applies_markdown_filters() -> None:
    source = (
        "#md # only in markdown\n"
        "#nb print('notebook only')\n"
        "x = 1 #py\n"
        "y = 2 #src\n"
    )
    chunks = LiterateParser().parse(source)
    assert chunks == [MarkdownChunk(lines=["only in markdown"]), CodeChunk(lines=["y = 2"])]


def test_parser_normalises_line_endings() -> None:
    chunks = LiterateParser().parse("# title\r\nvalue = 3\r\n")
    assert chunks == [MarkdownChunk(lines=["title"]), CodeChunk(lines=["value = 3"])]
