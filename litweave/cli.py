"""CLI entrypoints for litweave commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from jinja2 import TemplateNotFound

from .config import ConfigError, LitWeaveConfig, load_config
from .literate import MarkdownExtractor
from .logging import configure_logging
from .pipeline import Pipeline
from .postproc.frontmatter import FrontMatter
from .weave import DOCTYPES, ChunkExecutionError, Weaver, build_options


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_style_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--css", type=Path, help="Stylesheet to inline instead of the default.")
    parser.add_argument("--template", type=Path, help="Jinja2 page template to use instead of the default.")
    parser.add_argument(
        "--doctype",
        choices=DOCTYPES,
        help="Report format: self-contained HTML (md2html) or Markdown (github).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="litweave",
        description="Turn annotated Python sources into Markdown and woven HTML reports.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Convert an annotated source into Markdown.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    extract_parser.add_argument("source", help="Annotated Python source file.")
    extract_parser.add_argument(
        "-o",
        "--out-dir",
        default=".",
        help="Directory for the Markdown file (defaults to current directory).",
    )
    extract_parser.add_argument("--codefence", default="python", help="Language tag for code fences.")
    extract_parser.add_argument("--no-credit", action="store_true", help="Omit the credit footer.")
    extract_parser.add_argument(
        "--documenter",
        action="store_true",
        help="Emit MyST {code-cell} fences instead of plain fences.",
    )

    weave_parser = subparsers.add_parser(
        "weave",
        help="Execute a Python Markdown document and render a report.",
    )
    _add_verbose_option(weave_parser, suppress_default=True)
    weave_parser.add_argument("document", help="Markdown document with python code fences.")
    weave_parser.add_argument(
        "-o",
        "--out",
        default=None,
        help="Output file or directory (defaults to next to the document).",
    )
    _add_style_options(weave_parser)

    build_parser = subparsers.add_parser(
        "build",
        help="Extract, add front matter and weave in one run.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument("source", help="Annotated Python source file.")
    build_parser.add_argument("-o", "--out-dir", default=None, help="Output directory for all files.")
    build_parser.add_argument("--title", help="Title for the front matter header.")
    build_parser.add_argument("--author", help="Author for the front matter header.")
    build_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .litweave.yml (defaults to the source's directory).",
    )
    _add_style_options(build_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for litweave commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        if args.command == "extract":
            extractor = MarkdownExtractor(
                codefence=args.codefence,
                credit=not args.no_credit,
                documenter=bool(args.documenter),
            )
            output = extractor.extract(args.source, args.out_dir)
            print(f"Markdown written to {_relativize(output)}")
        elif args.command == "weave":
            weaver = Weaver(
                doctype=args.doctype or "md2html",
                css=args.css,
                template=args.template,
            )
            output = weaver.weave(args.document, args.out)
            print(f"Report written to {_relativize(output)}")
        elif args.command == "build":
            outcome = _run_build(args)
            print(f"Report written to {_relativize(outcome.report)}")
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except TemplateNotFound as exc:
        parser.exit(1, f"litweave {args.command} failed: template not found: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"{exc}\n")
    except (ConfigError, ValueError) as exc:
        parser.exit(1, f"litweave {args.command} failed: {exc}\n")
    except ChunkExecutionError as exc:
        parser.exit(1, f"litweave {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_build(args: argparse.Namespace):
    source = Path(args.source)
    config = load_config(args.config if args.config is not None else source.resolve().parent)
    header = _resolve_header(config, args)
    weave_config = config.weave
    weaver = Weaver(
        doctype=args.doctype or weave_config.doctype,
        css=args.css or weave_config.css,
        template=args.template or weave_config.template,
        fig_path=weave_config.fig_path,
        defaults=build_options(weave_config.options) if weave_config.options else None,
    )
    extractor = MarkdownExtractor(
        codefence=config.extract.codefence,
        credit=config.extract.credit,
        documenter=config.extract.documenter,
        lint=config.extract.lint,
    )
    out_dir = args.out_dir or config.out_dir or source.resolve().parent / "output"
    return Pipeline(extractor=extractor, weaver=weaver).run(source, out_dir, header=header)


def _resolve_header(config: LitWeaveConfig, args: argparse.Namespace) -> FrontMatter | None:
    configured = config.front_matter
    title = args.title or (configured.title if configured else None)
    author = args.author or (configured.author if configured else None)
    date = configured.date if configured else None
    if not any((title, author, date)):
        return None
    return FrontMatter(title=title, author=author, date=date)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
