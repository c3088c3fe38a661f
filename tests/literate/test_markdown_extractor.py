"""Tests for litweave.literate.markdown."""

from __future__ import annotations

from pathlib import Path

import pytest

from litweave.literate import CREDIT_LINE, MarkdownExtractor
from tests._fixtures.doc_builder import DocBuilder


def test_render_minimal_document() -> None:
    markdown = MarkdownExtractor(credit=False).render("# hello\n1+1\n")
    assert markdown == "hello\n\n```python\n1+1\n```\n"


def test_render_appends_credit_line() -> None:
    markdown = MarkdownExtractor().render("# hello\n1+1\n")
    assert markdown.endswith(f"```\n\n{CREDIT_LINE}\n")


def test_render_documenter_uses_code_cell_fences() -> None:
    markdown = MarkdownExtractor(credit=False, documenter=True).render("x = 1\n")
    assert markdown == "```{code-cell} python\nx = 1\n```\n"


def test_render_custom_codefence() -> None:
    markdown = MarkdownExtractor(credit=False, codefence="py").render("x = 1\n")
    assert markdown.startswith("```py\n")


def test_render_lengthens_fence_around_backticks() -> None:
    source = 's = """\n```\n"""\n'
    markdown = MarkdownExtractor(credit=False).render(source)
    assert markdown == '````python\ns = """\n```\n"""\n````\n'


def test_render_replaces_name_placeholder() -> None:
    markdown = MarkdownExtractor(credit=False).render("# Notes for @__NAME__\n", name="gotcha")
    assert markdown == "Notes for gotcha\n"


def test_render_runs_pre_and_postprocess_hooks() -> None:
    extractor = MarkdownExtractor(
        credit=False,
        preprocess=lambda text: text.replace("DRAFT", "Final"),
        postprocess=lambda markdown: markdown.upper(),
    )
    assert extractor.render("# DRAFT notes\n") == "FINAL NOTES\n"


def test_render_empty_source_without_credit() -> None:
    assert MarkdownExtractor(credit=False).render("") == ""


def test_extract_writes_markdown_into_new_directory(doc_builder: DocBuilder, tmp_path: Path) -> None:
    doc_builder.write({"lesson.py": "# Intro\nvalue = 2\nvalue * 3\n"})
    out_dir = tmp_path / "build" / "md"

    target = MarkdownExtractor().extract(doc_builder.path("lesson.py"), out_dir)

    assert target == out_dir / "lesson.md"
    text = target.read_text(encoding="utf-8")
    assert text.startswith("Intro\n\n```python\nvalue = 2\nvalue * 3\n```\n")


def test_extract_is_idempotent(doc_builder: DocBuilder, tmp_path: Path) -> None:
    doc_builder.write(
        {
            "lesson.py": """
            # # Title
            #
            # Some *prose*.

            def f(x):
                return x + 1

            ## a code comment
            f(1)
            """
        }
    )
    extractor = MarkdownExtractor()
    first = extractor.extract(doc_builder.path("lesson.py"), tmp_path / "out").read_bytes()
    second = extractor.extract(doc_builder.path("lesson.py"), tmp_path / "out").read_bytes()
    assert first == second
    assert b"# a code comment" in first


def test_extract_honours_explicit_name(doc_builder: DocBuilder, tmp_path: Path) -> None:
    doc_builder.write({"lesson.py": "# hi\n"})
    target = MarkdownExtractor().extract(doc_builder.path("lesson.py"), tmp_path, name="renamed")
    assert target.name == "renamed.md"


def test_extract_missing_source_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        MarkdownExtractor().extract(tmp_path / "missing.py", tmp_path / "out")
    assert not (tmp_path / "out").exists()
