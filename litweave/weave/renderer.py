"""Renderers that turn executed weave documents into reports."""

from __future__ import annotations

import base64
import html
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, Template
from markdown_it import MarkdownIt
from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..models import ChunkResult, CodeBlock, Figure, ProseBlock, WeaveDocument

GENERATOR = "litweave"
DEFAULT_TEMPLATE = "report.html.j2"
DEFAULT_STYLESHEET = "skeleton.css"

_FORMATTER = HtmlFormatter(nowrap=True)


@dataclass
class RenderedReport:
    """Rendered report text plus extra files (figures) keyed by relative path."""

    text: str
    assets: Dict[str, bytes] = field(default_factory=dict)


def highlight_code(code: str, language: str, attrs: str = "") -> str:
    """Return Pygments-highlighted HTML wrapped in ``<pre class="highlight">``."""
    if not language:
        return ""
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        lexer = TextLexer()
    body = highlight(code, lexer, _FORMATTER)
    css_language = html.escape(language, quote=True)
    return f'<pre class="highlight"><code class="language-{css_language}">{body}</code></pre>\n'


def _templates_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "templates"


def _figure_name(document: WeaveDocument, block: CodeBlock, number: int, figure: Figure) -> str:
    label = block.options.label or str(block.index)
    return f"{document.path.stem}_{label}_{number}.{figure.format}"


class HtmlRenderer:
    """Produces one self-contained HTML page: inlined stylesheet, embedded figures."""

    extension = ".html"

    def __init__(self, *, css: Path | None = None, template: Path | None = None) -> None:
        self.css = Path(css) if css is not None else None
        self.template = Path(template) if template is not None else None
        self._markdown = (
            MarkdownIt("commonmark", {"html": True, "highlight": highlight_code})
            .enable("table")
            .enable("strikethrough")
        )

    def render(
        self,
        document: WeaveDocument,
        results: Mapping[int, ChunkResult],
        *,
        generated_at: datetime | None = None,
    ) -> RenderedReport:
        body = self.render_body(document, results)
        context = self._prepare_context(document, body, generated_at or datetime.now(UTC))
        return RenderedReport(text=self._load_template().render(**context))

    def render_body(self, document: WeaveDocument, results: Mapping[int, ChunkResult]) -> str:
        parts: List[str] = []
        for block in document.blocks:
            if isinstance(block, ProseBlock):
                parts.append(self._markdown.render(block.text))
            else:
                rendered = self._render_chunk(document, block, results.get(block.index))
                if rendered:
                    parts.append(rendered)
        return "\n".join(parts)

    def _render_chunk(
        self, document: WeaveDocument, block: CodeBlock, result: Optional[ChunkResult]
    ) -> str:
        options = block.options
        parts: List[str] = []
        if options.echo:
            parts.append(highlight_code(block.source, "python"))
        if result is not None:
            if result.output and options.results == "markup":
                parts.append(f'<pre class="output"><code>{html.escape(result.output)}</code></pre>\n')
            elif result.output and options.results == "raw":
                parts.append(self._markdown.render(result.output))
            if result.error:
                parts.append(
                    f'<pre class="error" title="Error in chunk {block.index}">'
                    f"<code>{html.escape(result.error)}</code></pre>\n"
                )
            for number, figure in enumerate(result.figures, start=1):
                parts.append(self._render_figure(document, block, number, figure))
        if not parts:
            return ""
        anchor = f' id="{html.escape(options.label, quote=True)}"' if options.label else ""
        return f'<div class="chunk"{anchor}>\n' + "".join(parts) + "</div>\n"

    @staticmethod
    def _render_figure(document: WeaveDocument, block: CodeBlock, number: int, figure: Figure) -> str:
        encoded = base64.b64encode(figure.data).decode("ascii")
        alt = html.escape(figure.caption or _figure_name(document, block, number, figure), quote=True)
        caption = f"<figcaption>{html.escape(figure.caption)}</figcaption>" if figure.caption else ""
        return (
            f'<figure><img src="data:image/{figure.format};base64,{encoded}" alt="{alt}"/>'
            f"{caption}</figure>\n"
        )

    def _prepare_context(self, document: WeaveDocument, body: str, generated_at: datetime) -> Dict[str, Any]:
        metadata = document.metadata
        return {
            "title": _metadata_text(metadata.get("title")) or document.path.stem,
            "author": _metadata_text(metadata.get("author")),
            "date": _metadata_text(metadata.get("date")),
            "metadata": metadata,
            "body": Markup(body),
            "stylesheet": Markup(self._read_stylesheet()),
            "highlight_css": Markup(_FORMATTER.get_style_defs(".highlight")),
            "generator": GENERATOR,
            "generated_at": generated_at.strftime("%Y-%m-%d %H:%M:%S UTC"),
        }

    def _read_stylesheet(self) -> str:
        path = self.css or _templates_dir() / DEFAULT_STYLESHEET
        return path.read_text(encoding="utf-8")

    def _load_template(self) -> Template:
        if self.template is not None:
            directory, name = self.template.parent, self.template.name
        else:
            directory, name = _templates_dir(), DEFAULT_TEMPLATE
        env = Environment(
            loader=FileSystemLoader(str(directory)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        return env.get_template(name)


class MarkdownRenderer:
    """Produces GitHub-flavoured Markdown with output fences and figure files."""

    extension = ".md"

    def __init__(self, *, fig_path: str = "figures") -> None:
        self.fig_path = fig_path

    def render(
        self,
        document: WeaveDocument,
        results: Mapping[int, ChunkResult],
        *,
        generated_at: datetime | None = None,
    ) -> RenderedReport:
        assets: Dict[str, bytes] = {}
        parts: List[str] = []
        header = {key: value for key, value in document.metadata.items() if key != "weave_options"}
        if header:
            dumped = yaml.safe_dump(header, sort_keys=False, allow_unicode=True, default_flow_style=False)
            parts.append(f"---\n{dumped}---")
        for block in document.blocks:
            if isinstance(block, ProseBlock):
                parts.append(block.text)
                continue
            parts.extend(self._render_chunk(document, block, results.get(block.index), assets))
        text = "\n\n".join(part.rstrip("\n") for part in parts if part.strip())
        return RenderedReport(text=text + "\n" if text else "", assets=assets)

    def _render_chunk(
        self,
        document: WeaveDocument,
        block: CodeBlock,
        result: Optional[ChunkResult],
        assets: Dict[str, bytes],
    ) -> List[str]:
        options = block.options
        parts: List[str] = []
        if options.echo:
            parts.append(f"```python\n{block.source}```")
        if result is None:
            return parts
        if result.output and options.results == "markup":
            parts.append(f"```\n{_ensure_newline(result.output)}```")
        elif result.output and options.results == "raw":
            parts.append(result.output)
        if result.error:
            parts.append(f"```error\n{_ensure_newline(result.error)}```")
        for number, figure in enumerate(result.figures, start=1):
            relative = f"{self.fig_path}/{_figure_name(document, block, number, figure)}"
            assets[relative] = figure.data
            parts.append(f"![{figure.caption or ''}]({relative})")
        return parts


def _ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def _metadata_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


__all__ = ["GENERATOR", "HtmlRenderer", "MarkdownRenderer", "RenderedReport", "highlight_code"]
