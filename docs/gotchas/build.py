"""Build the Python gotchas tutorial: gotcha.py -> output/gotcha.{md,pmd,html}."""

from __future__ import annotations

from pathlib import Path

from litweave.logging import configure_logging
from litweave.pipeline import BuildOutcome, Pipeline
from litweave.postproc.frontmatter import FrontMatter
from litweave.weave import Weaver

HERE = Path(__file__).resolve().parent
SOURCE = HERE / "gotcha.py"
OUTPUT = HERE / "output"

HEADER = FrontMatter(
    title="Python Gotchas and How to Avoid Them",
    author="The litweave authors",
)


def build(out_dir: Path = OUTPUT) -> BuildOutcome:
    weaver = Weaver(css=HERE / "gotcha.css", template=HERE / "page.html.j2")
    return Pipeline(weaver=weaver).run(SOURCE, out_dir, header=HEADER)


def main() -> None:
    configure_logging()
    build()


if __name__ == "__main__":
    main()
