"""Core data models shared across litweave components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


@dataclass
class MarkdownChunk:
    """Consecutive prose lines of an annotated source, comment markers removed."""

    lines: List[str] = field(default_factory=list)


@dataclass
class CodeChunk:
    """Consecutive code lines of an annotated source."""

    lines: List[str] = field(default_factory=list)


Chunk = Union[MarkdownChunk, CodeChunk]


@dataclass
class ChunkOptions:
    """Per-chunk weaving options."""

    echo: bool = True
    eval: bool = True
    results: str = "markup"
    error: bool = False
    fig: bool = True
    label: Optional[str] = None
    fig_cap: Optional[str] = None


@dataclass
class ProseBlock:
    """Markdown text between evaluable chunks."""

    text: str
    line: int


@dataclass
class CodeBlock:
    """An evaluable fenced block of a weave document."""

    source: str
    options: ChunkOptions
    index: int
    line: int
    info: str = "python"


Block = Union[ProseBlock, CodeBlock]


@dataclass
class WeaveDocument:
    """A parsed weave document: front matter plus ordered blocks."""

    path: Path
    metadata: Dict[str, Any]
    blocks: List[Block]

    @property
    def code_blocks(self) -> List[CodeBlock]:
        return [block for block in self.blocks if isinstance(block, CodeBlock)]


@dataclass
class Figure:
    """Image captured while executing a chunk."""

    data: bytes
    format: str = "png"
    caption: Optional[str] = None


@dataclass
class ChunkResult:
    """Captured output of one executed chunk."""

    block: CodeBlock
    output: str = ""
    figures: List[Figure] = field(default_factory=list)
    error: Optional[str] = None
