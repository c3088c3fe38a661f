"""Tests for the bundled gotchas tutorial build."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

BUILD_SCRIPT = Path(__file__).resolve().parent.parent / "docs" / "gotchas" / "build.py"


def _load_build_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("gotchas_build", BUILD_SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_tutorial_builds_all_representations(tmp_path: Path) -> None:
    build = _load_build_script()

    outcome = build.build(tmp_path)

    assert outcome.markdown == tmp_path / "gotcha.md"
    assert outcome.woven_source == tmp_path / "gotcha.pmd"
    assert outcome.report == tmp_path / "gotcha.html"

    woven = outcome.woven_source.read_text(encoding="utf-8")
    assert woven == build.HEADER.render() + outcome.markdown.read_text(encoding="utf-8")

    html = outcome.report.read_text(encoding="utf-8")
    assert "<title>Python Gotchas and How to Avoid Them</title>" in html
    assert "The litweave authors" in html
    assert "max-width: 860px" in html
    assert "UnboundLocalError" in html
    assert 'class="error"' not in html
