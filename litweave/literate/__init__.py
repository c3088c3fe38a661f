"""Literate source to Markdown extraction."""

from .markdown import CREDIT_LINE, MarkdownExtractor
from .parser import LiterateParser

__all__ = ["CREDIT_LINE", "LiterateParser", "MarkdownExtractor"]
