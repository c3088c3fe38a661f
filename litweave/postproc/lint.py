"""Linting utilities for extracted markdown."""

from __future__ import annotations

import re
from typing import List, Optional

_FENCE_PATTERN = re.compile(r"^(`{3,}|~{3,})")


class MarkdownLinter:
    """Normalises line endings, trailing whitespace and blank runs outside code fences."""

    def lint(self, markdown: str) -> str:
        if not markdown.strip():
            return ""
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        lines = normalized.split("\n")
        cleaned: List[str] = []
        fence: Optional[str] = None
        previous_blank = False

        for line in lines:
            stripped = line.rstrip()
            match = _FENCE_PATTERN.match(stripped)
            if match:
                marker = match.group(1)
                if fence is None:
                    fence = marker
                elif marker[0] == fence[0] and len(marker) >= len(fence) and stripped == marker:
                    fence = None
                cleaned.append(stripped)
                previous_blank = False
                continue

            if fence is None:
                if stripped.startswith("#") and cleaned and cleaned[-1] != "":
                    cleaned.append("")
                if not stripped:
                    if previous_blank:
                        continue
                    previous_blank = True
                    cleaned.append("")
                    continue
                cleaned.append(stripped)
            else:
                # code keeps its own blank lines
                cleaned.append(stripped)
            previous_blank = False

        while cleaned and cleaned[-1] == "":
            cleaned.pop()

        return "\n".join(cleaned) + "\n"


__all__ = ["MarkdownLinter"]
