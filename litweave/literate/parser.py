"""Line classifier for annotated (literate) Python sources."""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import Chunk, CodeChunk, MarkdownChunk

_SEPARATOR_PATTERN = re.compile(r"^#-+\s*$")

# Filter tags select lines per output format. Markdown keeps #md and #src lines.
KEPT_TAGS: tuple[str, ...] = ("md", "src")
DROPPED_TAGS: tuple[str, ...] = ("nb", "py")


class LiterateParser:
    """Splits an annotated source into alternating prose and code chunks.

    Lines that are exactly ``#`` or start with ``# `` are prose; everything
    else is code. ``##`` lines are code comments with one ``#`` removed, and a
    ``#-`` line closes the current chunk so two code blocks stay separate.
    """

    def parse(self, text: str) -> List[Chunk]:
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = normalized.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        chunks: List[Chunk] = []
        current: Optional[Chunk] = None
        for raw in lines:
            line = self._apply_filters(raw)
            if line is None:
                continue
            if _SEPARATOR_PATTERN.match(line):
                current = None
                continue
            if line == "#" or line.startswith("# "):
                if not isinstance(current, MarkdownChunk):
                    current = MarkdownChunk()
                    chunks.append(current)
                current.lines.append(line[2:])
                continue
            if line.startswith("##"):
                line = line[1:]
            if not isinstance(current, CodeChunk):
                current = CodeChunk()
                chunks.append(current)
            current.lines.append(line)

        return self._tidy(chunks)

    @staticmethod
    def _apply_filters(line: str) -> Optional[str]:
        stripped = line.rstrip()
        for tag in KEPT_TAGS + DROPPED_TAGS:
            keep = tag in KEPT_TAGS
            prefix = f"#{tag}"
            if stripped == prefix or line.startswith(prefix + " "):
                return line[len(prefix) + 1 :] if keep else None
            suffix = f" #{tag}"
            if stripped.endswith(suffix):
                return stripped[: -len(suffix)] if keep else None
        return line

    @staticmethod
    def _tidy(chunks: List[Chunk]) -> List[Chunk]:
        tidied: List[Chunk] = []
        for chunk in chunks:
            lines = list(chunk.lines)
            while lines and not lines[0].strip():
                lines.pop(0)
            while lines and not lines[-1].strip():
                lines.pop()
            if not lines:
                continue
            tidied.append(type(chunk)(lines=lines))
        return tidied


__all__ = ["LiterateParser", "KEPT_TAGS", "DROPPED_TAGS"]
