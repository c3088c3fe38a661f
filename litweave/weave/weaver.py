"""Weaving: execute a document's chunks and write the rendered report."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Dict

from ..logging import get_logger
from ..models import ChunkOptions, ChunkResult
from .executor import ChunkExecutor
from .reader import read_document
from .renderer import HtmlRenderer, MarkdownRenderer

DOCTYPES: tuple[str, ...] = ("md2html", "github")


class Weaver:
    """Runs every evaluable chunk of a document and writes one report.

    Nothing is written until all chunks have run, so a halting chunk error
    leaves any previous report untouched.
    """

    def __init__(
        self,
        *,
        doctype: str = "md2html",
        css: Path | str | None = None,
        template: Path | str | None = None,
        fig_path: str = "figures",
        defaults: ChunkOptions | None = None,
    ) -> None:
        if doctype not in DOCTYPES:
            raise ValueError(f"Unsupported doctype {doctype!r}; expected one of {', '.join(DOCTYPES)}")
        self.doctype = doctype
        self.defaults = defaults
        if doctype == "md2html":
            self.renderer: HtmlRenderer | MarkdownRenderer = HtmlRenderer(
                css=Path(css) if css is not None else None,
                template=Path(template) if template is not None else None,
            )
        else:
            self.renderer = MarkdownRenderer(fig_path=fig_path)
        self.logger = get_logger("weave")

    def weave(self, path: Path | str, out_path: Path | str | None = None) -> Path:
        """Weave ``path`` and return the written report path."""
        doc_path = Path(path)
        document = read_document(doc_path, defaults=self.defaults)
        code_blocks = document.code_blocks
        self.logger.info("Weaving %s (%d chunks)", doc_path, len(code_blocks))

        executor = ChunkExecutor(doc_path)
        results: Dict[int, ChunkResult] = {}
        for block in code_blocks:
            results[block.index] = executor.run(block)

        report = self.renderer.render(document, results, generated_at=datetime.now(UTC))
        target = self._resolve_output(doc_path, out_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        for relative, data in report.assets.items():
            asset_path = target.parent / relative
            asset_path.parent.mkdir(parents=True, exist_ok=True)
            asset_path.write_bytes(data)
        target.write_text(report.text, encoding="utf-8")
        self.logger.info("Report written to %s", target)
        return target

    def _resolve_output(self, doc_path: Path, out_path: Path | str | None) -> Path:
        filename = doc_path.with_suffix(self.renderer.extension).name
        if out_path is None:
            target = doc_path.parent / filename
        else:
            candidate = Path(out_path)
            if candidate.is_dir() or not candidate.suffix:
                target = candidate / filename
            else:
                target = candidate
        if target.resolve() == doc_path.resolve():
            # the report never replaces the document it was woven from
            target = target.with_name(f"{target.stem}.woven{target.suffix}")
        return target


__all__ = ["DOCTYPES", "Weaver"]
