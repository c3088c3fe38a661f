"""Helper utilities for writing throwaway documents in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping


class DocBuilder:
    """Utility for writing annotated sources and weave documents into a scratch directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "docs"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries under the scratch directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self, relative: str = "") -> Path:
        """Return a path inside the scratch directory."""
        return self.root / relative if relative else self.root


__all__ = ["DocBuilder"]
