"""Fixed front-matter headers prepended to documents before weaving."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import yaml


@dataclass
class FrontMatter:
    """Title/author/date metadata rendered as a YAML front-matter block."""

    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        values = {"title": self.title, "author": self.author, "date": self.date}
        return {key: value for key, value in values.items() if value}

    def render(self) -> str:
        """Return the ``---`` delimited header followed by a blank line."""
        data = self.as_dict()
        if not data:
            return ""
        body = yaml.safe_dump(
            data,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=2**16,
        )
        return f"---\n{body}---\n\n"


def prepend_front_matter(markdown: str, header: FrontMatter | None) -> str:
    """Return ``markdown`` with the rendered header in front and nothing else altered."""
    if header is None:
        return markdown
    return header.render() + markdown


__all__ = ["FrontMatter", "prepend_front_matter"]
