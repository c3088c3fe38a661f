"""Tests for litweave.weave.executor."""

from __future__ import annotations

import linecache
import os
from pathlib import Path

import pytest

from litweave.models import ChunkOptions, CodeBlock
from litweave.weave.executor import ChunkExecutionError, ChunkExecutor


def _block(source: str, *, index: int = 1, line: int = 1, **options: object) -> CodeBlock:
    return CodeBlock(source=source, options=ChunkOptions(**options), index=index, line=line)


def test_expression_value_is_displayed() -> None:
    result = ChunkExecutor().run(_block("1+1\n"))
    assert result.output == "2\n"
    assert result.error is None


def test_state_persists_between_chunks() -> None:
    executor = ChunkExecutor()
    executor.run(_block("x = 1\n"))
    result = executor.run(_block("x += 1\nprint(x)\n", index=2))
    assert result.output == "2\n"


def test_trailing_semicolon_suppresses_display() -> None:
    result = ChunkExecutor().run(_block("value = [1, 2]\nvalue;\n"))
    assert result.output == ""


def test_semicolon_before_comment_suppresses_display() -> None:
    result = ChunkExecutor().run(_block("x = 5\nx;  # hidden\n"))
    assert result.output == ""


def test_semicolon_inside_string_does_not_suppress_display() -> None:
    result = ChunkExecutor().run(_block("'a;'\n"))
    assert result.output == "'a;'\n"


def test_none_results_are_not_displayed() -> None:
    result = ChunkExecutor().run(_block("print('hi')\n"))
    assert result.output == "hi\n"


def test_stdout_and_stderr_are_captured_in_order() -> None:
    source = "import sys\nprint('out')\nprint('err', file=sys.stderr)\n'done'\n"
    result = ChunkExecutor().run(_block(source))
    assert result.output == "out\nerr\n'done'\n"


def test_eval_false_skips_execution() -> None:
    executor = ChunkExecutor()
    result = executor.run(_block("flag = True\n", eval=False))
    assert result.output == ""
    assert "flag" not in executor.namespace


def test_chunks_run_in_document_directory(tmp_path: Path) -> None:
    doc_dir = tmp_path / "lesson"
    doc_dir.mkdir()
    before = os.getcwd()

    result = ChunkExecutor(doc_dir / "doc.pmd").run(_block("import os\nos.getcwd()\n"))

    assert result.output == repr(str(doc_dir.resolve())) + "\n"
    assert os.getcwd() == before


def test_failing_chunk_raises_with_document_line(tmp_path: Path) -> None:
    executor = ChunkExecutor(tmp_path / "doc.pmd")
    block = _block("x = 1\n1 / 0\n", index=3, line=10)

    with pytest.raises(ChunkExecutionError) as excinfo:
        executor.run(block)

    error = excinfo.value
    assert error.index == 3
    assert error.line == 11
    assert isinstance(error.__cause__, ZeroDivisionError)
    assert "chunk 3" in str(error)
    assert "doc.pmd:11" in str(error)


def test_syntax_error_reports_chunk_line() -> None:
    with pytest.raises(ChunkExecutionError) as excinfo:
        ChunkExecutor().run(_block("ok = 1\ndef broken(:\n", line=5))
    assert excinfo.value.line == 6
    assert isinstance(excinfo.value.__cause__, SyntaxError)


def test_error_option_keeps_traceback_inline() -> None:
    executor = ChunkExecutor()
    result = executor.run(_block("print('before')\nraise ValueError('boom')\n", error=True))

    assert result.output == "before\n"
    assert result.error is not None
    assert "ValueError: boom" in result.error
    assert "executor.py" not in result.error
    follow_up = executor.run(_block("'still running'\n", index=2))
    assert follow_up.output == "'still running'\n"


def test_matplotlib_figures_are_captured() -> None:
    pytest.importorskip("matplotlib")
    source = (
        "import matplotlib\n"
        "matplotlib.use('Agg')\n"
        "import matplotlib.pyplot as plt\n"
        "plt.plot([1, 2, 3]);\n"
    )
    executor = ChunkExecutor()
    result = executor.run(_block(source, fig_cap="A line"))

    assert len(result.figures) == 1
    assert result.figures[0].data.startswith(b"\x89PNG")
    assert result.figures[0].caption == "A line"

    hidden = executor.run(_block("plt.plot([3, 2, 1]);\n", index=2, fig=False))
    assert hidden.figures == []
    import matplotlib.pyplot as plt

    assert plt.get_fignums() == []


def test_system_exit_is_reported_as_chunk_error(tmp_path: Path) -> None:
    executor = ChunkExecutor(tmp_path / "doc.pmd")

    with pytest.raises(ChunkExecutionError) as excinfo:
        executor.run(_block("print('leaving')\nraise SystemExit('bye')\n", index=2, line=7))

    assert excinfo.value.index == 2
    assert excinfo.value.line == 8
    assert isinstance(excinfo.value.__cause__, SystemExit)
    assert "SystemExit: bye" in str(excinfo.value)


def test_sys_exit_zero_still_halts() -> None:
    with pytest.raises(ChunkExecutionError, match="SystemExit: 0"):
        ChunkExecutor().run(_block("import sys\nsys.exit(0)\n"))


def test_system_exit_kept_inline_with_error_option() -> None:
    executor = ChunkExecutor()
    result = executor.run(_block("raise SystemExit(3)\n", error=True))

    assert result.error is not None
    assert "SystemExit: 3" in result.error
    assert executor.run(_block("'next'\n", index=2)).output == "'next'\n"


def test_chunk_source_is_not_left_in_linecache(tmp_path: Path) -> None:
    executor = ChunkExecutor(tmp_path / "doc.pmd")
    executor.run(_block("1\n", index=1))
    with pytest.raises(ChunkExecutionError):
        executor.run(_block("1 / 0\n", index=2))

    assert "<doc.pmd chunk 1>" not in linecache.cache
    assert "<doc.pmd chunk 2>" not in linecache.cache
