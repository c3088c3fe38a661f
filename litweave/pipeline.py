"""Pipeline orchestration: extract, copy with front matter, weave."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from .literate import MarkdownExtractor
from .logging import get_logger
from .postproc.frontmatter import FrontMatter, prepend_front_matter
from .weave import Weaver

WEAVE_SUFFIX = ".pmd"


@dataclass
class BuildOutcome:
    """Paths produced by one pipeline run, one per document representation."""

    markdown: Path
    woven_source: Path
    report: Path


class Pipeline:
    """Runs the extractor and then the weaver, once, in sequence.

    The pipeline has no error handling of its own: whatever the extractor,
    the copy or the weaver raises reaches the caller unchanged.
    """

    def __init__(
        self,
        extractor: MarkdownExtractor | None = None,
        weaver: Weaver | None = None,
    ) -> None:
        self.extractor = extractor or MarkdownExtractor()
        self.weaver = weaver or Weaver()
        self.logger = get_logger("pipeline")

    def run(
        self,
        source: Path | str,
        out_dir: Path | str,
        *,
        header: FrontMatter | None = None,
    ) -> BuildOutcome:
        """Build ``<out_dir>/<stem>.md``, ``.pmd`` and the final report from ``source``."""
        source_path = Path(source)
        target_dir = Path(out_dir)
        self.logger.info("Building %s into %s", source_path, target_dir)

        markdown = self.extractor.extract(source_path, target_dir)
        woven_source = self.copy_source(markdown, header=header)
        report = self.weaver.weave(woven_source, self._report_path(markdown))

        self.logger.info("Build finished: %s", report)
        return BuildOutcome(markdown=markdown, woven_source=woven_source, report=report)

    def copy_source(self, markdown: Path, *, header: FrontMatter | None = None) -> Path:
        """Copy the extracted Markdown to ``.pmd``, overwriting, with ``header`` prepended."""
        target = markdown.with_suffix(WEAVE_SUFFIX)
        if header is None or not header.render():
            shutil.copyfile(markdown, target)
        else:
            content = markdown.read_text(encoding="utf-8")
            target.write_text(prepend_front_matter(content, header), encoding="utf-8")
        self.logger.debug("Copied %s -> %s", markdown, target)
        return target

    def _report_path(self, markdown: Path) -> Path:
        report = markdown.with_suffix(self.weaver.renderer.extension)
        if report == markdown:
            # Markdown reports must not overwrite the extracted source.
            report = markdown.with_name(f"{markdown.stem}.woven{report.suffix}")
        return report


__all__ = ["BuildOutcome", "Pipeline", "WEAVE_SUFFIX"]
