"""
Command-line entry points for the bookprep tools.

Usage:
    bookprep parse lesson.md --html         Parse and print HTML
    bookprep parse lesson.md                Parse and print the JSON tree
    bookprep preprocess < in.md > out.md    Rewrite Markdown for the print build
    bookprep links build/epub               Rewrite cross-lesson links in place

Each tool also has a standalone command with its historical interface:
    md2html <path> [--html]
    preprocess-markdown                     (stdin → stdout, no flags)
    preprocess-epub-dir <directory>

Requires: PyYAML (for bookprep.yaml)
"""

import argparse
import os
import sys
import traceback

from bookprep.config import ToolConfig
from bookprep.console import Reporter
from bookprep.document import parse_file
from bookprep.emitters import EMITTERS, DEFAULT_EMITTER
from bookprep.exceptions import BookprepError, InputError
from bookprep.links import rewrite_directory
from bookprep.preprocess import preprocess_stream


ERROR_LOG = "build_error.log"


# ── Parse command ──────────────────────────────────────────────────────


def cmd_parse(args, config, reporter):
    """Parse a Markdown file and print it as HTML or a JSON tree."""
    if not args.path:
        raise InputError("Path not given")

    document = parse_file(args.path, encoding=config.encoding)
    reporter.log(f"  Parsed {args.path}: {len(document.children)} block(s)")

    mode = args.format or DEFAULT_EMITTER
    emitter = EMITTERS[mode](config=config, indent=getattr(args, "indent", None))
    output = emitter.emit(document)

    if mode == "html":
        sys.stdout.write(output)
    else:
        sys.stdout.write(output + "\n")
    return 0


# ── Preprocess command ─────────────────────────────────────────────────


def cmd_preprocess(args, config, reporter):
    """Rewrite tables, figure captions and lesson headings for the print build."""
    input_path = getattr(args, "input", None)
    output_path = getattr(args, "output", None)

    infile = sys.stdin
    outfile = sys.stdout
    try:
        if input_path:
            try:
                infile = open(input_path, "r", encoding=config.encoding)
            except OSError as e:
                raise InputError(f"Cannot open file, {input_path}: {e.strerror or e}") from e
        elif hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(encoding=config.encoding)

        if output_path:
            try:
                outfile = open(output_path, "w", encoding=config.encoding)
            except OSError as e:
                raise InputError(f"Cannot write file, {output_path}: {e.strerror or e}") from e

        try:
            preprocess_stream(infile, outfile, config)
        except UnicodeDecodeError as e:
            source = input_path or "standard input"
            raise InputError(f"Cannot read {source}: not valid {config.encoding} ({e.reason})") from e
    finally:
        if infile is not sys.stdin:
            infile.close()
        if outfile is not sys.stdout:
            outfile.close()

    if output_path:
        reporter.ok(output_path)
    return 0


# ── Links command ──────────────────────────────────────────────────────


def cmd_links(args, config, reporter):
    """Rewrite /section-N/lesson-M links to the sequential chNNN.xhtml names."""
    if not args.directory:
        raise InputError("Directory not given")
    if not os.path.isdir(args.directory):
        raise InputError(f"Not a directory: {args.directory}")

    changed = rewrite_directory(
        args.directory,
        config=config,
        dry_run=args.dry_run,
        reporter=reporter,
    )
    reporter.log(f"  Done. {len(changed)} file(s) {'to rewrite' if args.dry_run else 'rewritten'}.")
    return 0


# ── Argument Parser ────────────────────────────────────────────────────


def build_parser():
    parser = argparse.ArgumentParser(
        prog="bookprep",
        description="Markdown preprocessing tools for the book build",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s parse lesson.md --html        Preview a lesson as HTML
  %(prog)s parse lesson.md --indent 2    Dump the parsed tree as JSON
  %(prog)s preprocess < in.md > out.md   Prepare Markdown for the PDF build
  %(prog)s links build/epub --dry-run    Show which files would be rewritten
        """,
    )
    _add_common_args(parser)

    sub = parser.add_subparsers(dest="command")

    # ── parse ──────────────────────────────────────────────
    parse_p = sub.add_parser("parse", help="Parse Markdown to HTML or JSON")
    parse_p.add_argument("path", nargs="?", help="Markdown file")
    fmt = parse_p.add_mutually_exclusive_group()
    fmt.add_argument("--html", dest="format", action="store_const", const="html")
    fmt.add_argument("--json", dest="format", action="store_const", const="json")
    parse_p.add_argument("--indent", type=int, default=None, help="JSON indentation")

    # ── preprocess ─────────────────────────────────────────
    pre_p = sub.add_parser("preprocess", help="Rewrite Markdown for the print build")
    pre_p.add_argument("input", nargs="?", help="Input file (default: stdin)")
    pre_p.add_argument("--output", "-o", help="Output file (default: stdout)")

    # ── links ──────────────────────────────────────────────
    links_p = sub.add_parser("links", help="Rewrite cross-lesson links in place")
    links_p.add_argument("directory", nargs="?", help="Directory of lesson files")
    links_p.add_argument(
        "--dry-run", action="store_true", help="Report changes without writing"
    )

    return parser


def _add_common_args(parser):
    parser.add_argument("--config", help="Path to bookprep.yaml")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--no-color", action="store_true", help="Plain output")


DISPATCH = {
    "parse": cmd_parse,
    "preprocess": cmd_preprocess,
    "links": cmd_links,
}


# ── Runners ────────────────────────────────────────────────────────────


def execute(handler, args):
    """Load config, run a command handler, turn BookprepError into exit 1."""
    reporter = Reporter(
        verbose=getattr(args, "verbose", False),
        color=False if getattr(args, "no_color", False) else None,
    )
    try:
        config = ToolConfig.load(getattr(args, "config", None))
        return handler(args, config, reporter)
    except BookprepError as e:
        reporter.error(e)
        return 1


def run(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = DISPATCH.get(args.command)
    if handler is None:
        parser.print_help()
        return 0
    return execute(handler, args)


def run_md2html(argv=None):
    parser = argparse.ArgumentParser(
        prog="md2html", description="Parse Markdown; print JSON, or HTML with --html"
    )
    parser.add_argument("path", nargs="?")
    parser.add_argument("--html", dest="format", action="store_const", const="html")
    _add_common_args(parser)
    return execute(cmd_parse, parser.parse_args(argv))


def run_preprocess_markdown(argv=None):
    parser = argparse.ArgumentParser(
        prog="preprocess-markdown",
        description="Rewrite Markdown from stdin for the print build",
    )
    _add_common_args(parser)
    return execute(cmd_preprocess, parser.parse_args(argv))


def run_epub_links(argv=None):
    parser = argparse.ArgumentParser(
        prog="preprocess-epub-dir",
        description="Rewrite cross-lesson links to chNNN.xhtml names",
    )
    parser.add_argument("directory", nargs="?")
    parser.add_argument("--dry-run", action="store_true")
    _add_common_args(parser)
    return execute(cmd_links, parser.parse_args(argv))


# ── Main ───────────────────────────────────────────────────────────────


def launch(runner):
    """Run a command, mapping its result, Ctrl-C and crashes to an exit status."""
    try:
        code = runner()
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        with open(ERROR_LOG, "w") as f:
            traceback.print_exc(file=f)
        print(f"\nUnexpected error: {e}", file=sys.stderr)
        print(f"Full traceback written to {ERROR_LOG}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


def main():
    launch(run)


def md2html_main():
    launch(run_md2html)


def preprocess_markdown_main():
    launch(run_preprocess_markdown)


def epub_links_main():
    launch(run_epub_links)


if __name__ == "__main__":
    main()
