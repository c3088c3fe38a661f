"""Execute Python Markdown documents and render them as reports."""

from .executor import ChunkExecutionError, ChunkExecutor
from .options import ChunkOptionError, build_options, parse_info, split_options
from .reader import DocumentError, parse_document, read_document
from .renderer import HtmlRenderer, MarkdownRenderer, RenderedReport
from .weaver import DOCTYPES, Weaver

__all__ = [
    "ChunkExecutionError",
    "ChunkExecutor",
    "ChunkOptionError",
    "DocumentError",
    "DOCTYPES",
    "HtmlRenderer",
    "MarkdownRenderer",
    "RenderedReport",
    "Weaver",
    "build_options",
    "parse_document",
    "parse_info",
    "read_document",
    "split_options",
]
