"""Post-processing helpers for extracted and copied documents."""

from .frontmatter import FrontMatter, prepend_front_matter
from .lint import MarkdownLinter

__all__ = ["FrontMatter", "MarkdownLinter", "prepend_front_matter"]
