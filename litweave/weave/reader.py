"""Reads weave documents: YAML front matter plus Markdown with evaluable fences."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import frontmatter
import yaml
from markdown_it import MarkdownIt

from ..models import Block, ChunkOptions, CodeBlock, ProseBlock, WeaveDocument
from .options import build_options, parse_info, split_options

EVALUABLE_LANGUAGES = frozenset({"python", "py", "python3"})


class DocumentError(ValueError):
    """Raised when a document's front matter cannot be parsed."""


def read_document(path: Path | str, *, defaults: ChunkOptions | None = None) -> WeaveDocument:
    """Load and split a weave document from disk."""
    doc_path = Path(path)
    text = doc_path.read_text(encoding="utf-8")
    return parse_document(text, path=doc_path, defaults=defaults)


def parse_document(
    text: str,
    *,
    path: Path,
    defaults: ChunkOptions | None = None,
) -> WeaveDocument:
    """Split ``text`` into prose and code blocks.

    Only top-level fences tagged ``python``/``py`` are evaluable; other fences
    and fences nested in lists or quotes stay part of the prose. Block line
    numbers are 1-based positions in ``text``, front matter included.
    """
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or type(exc).__name__
        mark = getattr(exc, "problem_mark", None)
        where = f"{path}:{mark.line + 1}" if mark is not None else str(path)
        raise DocumentError(f"Invalid front matter in {where}: {problem}") from exc
    metadata: Dict[str, Any] = dict(post.metadata)
    body = post.content
    offset = _line_offset(text, body)

    document_defaults = _as_mapping(metadata.get("weave_options"))
    base = build_options(document_defaults, defaults or ChunkOptions())

    lines = body.split("\n")
    tokens = MarkdownIt("commonmark").parse(body)

    blocks: List[Block] = []
    cursor = 0
    index = 0
    for token in tokens:
        if token.type != "fence" or token.level != 0 or token.map is None:
            continue
        language, option_text = parse_info(token.info)
        if language not in EVALUABLE_LANGUAGES:
            continue
        start, end = token.map
        _append_prose(blocks, lines[cursor:start], cursor + offset + 1)
        index += 1
        blocks.append(
            CodeBlock(
                source=token.content,
                options=build_options(split_options(option_text), base),
                index=index,
                line=start + offset + 2,
                info=token.info.strip(),
            )
        )
        cursor = end
    _append_prose(blocks, lines[cursor:], cursor + offset + 1)

    return WeaveDocument(path=path, metadata=metadata, blocks=blocks)


def _append_prose(blocks: List[Block], lines: Sequence[str], first_line: int) -> None:
    lines = list(lines)
    while lines and not lines[0].strip():
        lines.pop(0)
        first_line += 1
    while lines and not lines[-1].strip():
        lines.pop()
    if lines:
        blocks.append(ProseBlock(text="\n".join(lines), line=first_line))


def _line_offset(text: str, body: str) -> int:
    if not body:
        return 0
    position = text.rfind(body)
    if position <= 0:
        return 0
    return text.count("\n", 0, position)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, dict) else {}


__all__ = ["DocumentError", "EVALUABLE_LANGUAGES", "parse_document", "read_document"]
