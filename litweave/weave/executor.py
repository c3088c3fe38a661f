"""Executes evaluable chunks in a persistent namespace and captures their output."""

from __future__ import annotations

import ast
import builtins
import contextlib
import io
import linecache
import os
import sys
import tokenize
import traceback
from pathlib import Path
from types import TracebackType
from typing import Any, ContextManager, Dict, List, Optional

from ..logging import get_logger
from ..models import ChunkResult, CodeBlock, Figure

# Figures are rendered off-screen; only matters if pyplot is not loaded yet.
os.environ.setdefault("MPLBACKEND", "Agg")

_INSIGNIFICANT_TOKENS = frozenset(
    {
        tokenize.COMMENT,
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
    }
)


class ChunkExecutionError(RuntimeError):
    """Raised when a chunk fails and the document did not ask to keep going."""

    def __init__(self, message: str, *, path: Path | None, index: int, line: int) -> None:
        super().__init__(message)
        self.path = path
        self.index = index
        self.line = line


class ChunkExecutor:
    """Runs the code blocks of one document, in order, sharing a single namespace.

    stdout and stderr are captured together. A chunk ending in an expression
    shows the ``repr`` of its value like the interactive prompt does, unless
    the chunk ends with ``;``. Figures left open by matplotlib are collected
    after each chunk.
    """

    def __init__(self, path: Path | str | None = None, *, working_dir: Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        if working_dir is None and self.path is not None:
            working_dir = self.path.resolve().parent
        self.working_dir = working_dir
        self.namespace: Dict[str, Any] = {"__name__": "__main__", "__builtins__": builtins}
        if self.path is not None:
            self.namespace["__file__"] = str(self.path)
        self.logger = get_logger("weave.executor")

    def run(self, block: CodeBlock) -> ChunkResult:
        """Execute ``block`` and return what it printed, displayed and drew."""
        if not block.options.eval:
            self.logger.debug("Skipping chunk %d (eval=false)", block.index)
            return ChunkResult(block=block)

        filename = self._filename(block)
        linecache.cache[filename] = (
            len(block.source),
            None,
            block.source.splitlines(keepends=True),
            filename,
        )
        self.logger.debug("Running chunk %d at line %d", block.index, block.line)

        buffer = io.StringIO()
        error: Optional[str] = None
        try:
            with self._working_directory(), contextlib.redirect_stdout(buffer), contextlib.redirect_stderr(buffer):
                self._execute(block, filename)
        except (Exception, SystemExit) as exc:
            line = self._error_line(exc, filename, block)
            if not block.options.error:
                self._close_figures()
                location = f"{self.path}:{line}" if self.path is not None else f"line {line}"
                raise ChunkExecutionError(
                    f"Error in chunk {block.index} ({location}): {type(exc).__name__}: {exc}",
                    path=self.path,
                    index=block.index,
                    line=line,
                ) from exc
            error = self._format_error(exc, filename)
            self.logger.warning("Chunk %d raised %s; keeping the error inline", block.index, type(exc).__name__)
        finally:
            linecache.cache.pop(filename, None)

        figures = self._collect_figures(block)
        if not block.options.fig:
            figures = []
        return ChunkResult(block=block, output=buffer.getvalue(), figures=figures, error=error)

    def _execute(self, block: CodeBlock, filename: str) -> None:
        tree = ast.parse(block.source, filename=filename, mode="exec")
        display: Optional[ast.Expression] = None
        if tree.body and isinstance(tree.body[-1], ast.Expr) and not _display_suppressed(block.source):
            last = tree.body.pop()
            display = ast.Expression(body=last.value)
        if tree.body:
            exec(compile(tree, filename, "exec"), self.namespace)
        if display is not None:
            value = eval(compile(display, filename, "eval"), self.namespace)
            if value is not None:
                print(repr(value))

    def _working_directory(self) -> ContextManager[Any]:
        if self.working_dir is None:
            return contextlib.nullcontext()
        return contextlib.chdir(self.working_dir)

    def _filename(self, block: CodeBlock) -> str:
        name = self.path.name if self.path is not None else "document"
        return f"<{name} chunk {block.index}>"

    def _error_line(self, exc: BaseException, filename: str, block: CodeBlock) -> int:
        relative: Optional[int] = None
        if isinstance(exc, SyntaxError) and exc.filename == filename and exc.lineno:
            relative = exc.lineno
        else:
            for frame in traceback.extract_tb(exc.__traceback__):
                if frame.filename == filename and frame.lineno:
                    relative = frame.lineno
        if relative is None:
            return block.line
        return block.line + relative - 1

    @staticmethod
    def _format_error(exc: BaseException, filename: str) -> str:
        tb: Optional[TracebackType] = exc.__traceback__
        while tb is not None and tb.tb_frame.f_code.co_filename != filename:
            tb = tb.tb_next
        return "".join(traceback.format_exception(type(exc), exc, tb))

    def _collect_figures(self, block: CodeBlock) -> List[Figure]:
        pyplot = sys.modules.get("matplotlib.pyplot")
        if pyplot is None:
            return []
        figures: List[Figure] = []
        for number in pyplot.get_fignums():
            buffer = io.BytesIO()
            pyplot.figure(number).savefig(buffer, format="png", bbox_inches="tight")
            figures.append(Figure(data=buffer.getvalue(), format="png", caption=block.options.fig_cap))
        pyplot.close("all")
        return figures

    @staticmethod
    def _close_figures() -> None:
        pyplot = sys.modules.get("matplotlib.pyplot")
        if pyplot is not None:
            pyplot.close("all")


def _display_suppressed(source: str) -> bool:
    """Return True when the last significant token of ``source`` is ``;``."""
    last: Optional[tokenize.TokenInfo] = None
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type not in _INSIGNIFICANT_TOKENS:
                last = token
    except tokenize.TokenError:
        return False
    return last is not None and last.type == tokenize.OP and last.string == ";"


__all__ = ["ChunkExecutionError", "ChunkExecutor"]
