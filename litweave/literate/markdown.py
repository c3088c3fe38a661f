"""Markdown extraction from annotated Python sources."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..logging import get_logger
from ..models import CodeChunk, MarkdownChunk
from ..postproc.lint import MarkdownLinter
from .parser import LiterateParser

CREDIT_LINE = "*This page was generated using litweave.*"
NAME_PLACEHOLDER = "@__NAME__"

_BACKTICK_RUN = re.compile(r"`{3,}")

TextHook = Callable[[str], str]


class MarkdownExtractor:
    """Turns an annotated source into Markdown: prose as text, code as fenced blocks."""

    def __init__(
        self,
        *,
        codefence: str = "python",
        credit: bool = True,
        documenter: bool = False,
        lint: bool = True,
        preprocess: Optional[TextHook] = None,
        postprocess: Optional[TextHook] = None,
        parser: LiterateParser | None = None,
        linter: MarkdownLinter | None = None,
    ) -> None:
        self.codefence = codefence
        self.credit = credit
        self.documenter = documenter
        self.lint = lint
        self.preprocess = preprocess
        self.postprocess = postprocess
        self.parser = parser or LiterateParser()
        self.linter = linter or MarkdownLinter()
        self.logger = get_logger("literate")

    def render(self, text: str, name: str = "document") -> str:
        """Return the Markdown rendition of an annotated source string."""
        if self.preprocess is not None:
            text = self.preprocess(text)
        text = text.replace(NAME_PLACEHOLDER, name)

        parts: List[str] = []
        for chunk in self.parser.parse(text):
            if isinstance(chunk, MarkdownChunk):
                parts.append("\n".join(chunk.lines))
            elif isinstance(chunk, CodeChunk):
                parts.append(self._fence(chunk.lines))
        if self.credit:
            parts.append(CREDIT_LINE)

        markdown = "\n\n".join(parts) + "\n" if parts else ""
        if self.lint:
            markdown = self.linter.lint(markdown)
        if self.postprocess is not None:
            markdown = self.postprocess(markdown)
        return markdown

    def extract(self, source: Path | str, out_dir: Path | str, name: str | None = None) -> Path:
        """Write ``<out_dir>/<name>.md`` for ``source`` and return its path."""
        source_path = Path(source)
        text = source_path.read_text(encoding="utf-8")
        base_name = name or source_path.stem
        markdown = self.render(text, base_name)

        target_dir = Path(out_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{base_name}.md"
        target.write_text(markdown, encoding="utf-8")
        self.logger.info("Extracted %s -> %s", source_path, target)
        return target

    def _fence(self, lines: Sequence[str]) -> str:
        longest = max((len(run) for line in lines for run in _BACKTICK_RUN.findall(line)), default=0)
        marker = "`" * max(3, longest + 1)
        if self.documenter:
            opener = f"{marker}{{code-cell}} {self.codefence}"
        else:
            opener = f"{marker}{self.codefence}"
        return "\n".join([opener, *lines, marker])


__all__ = ["CREDIT_LINE", "MarkdownExtractor"]
