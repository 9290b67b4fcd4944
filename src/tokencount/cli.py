# src/tokencount/cli.py
import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import List, Optional

from tokencount.config import (
    DEFAULT_ENCODING,
    ENCODINGS,
    ConfigurationError,
    ScanOptions,
    normalize_extensions,
)
from tokencount.core.aggregator import aggregate, build_summary, resolve_worker_count
from tokencount.core.ignore import PathFilter
from tokencount.core.report import FORMATS, SORT_KEYS, display_stats, render
from tokencount.core.scanner import discover_all
from tokencount.logging_config import setup_logging
from tokencount.utils.tokenizer import Tokenizer


def get_version() -> str:
    try:
        return version("tokencount")
    except PackageNotFoundError:
        return "unknown"


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {number}")
    return number


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="tokencount",
        description="Count GPT tokens across files.",
    )
    parser.add_argument("paths", metavar="PATH", nargs="*", help="Paths to scan (default: current directory)")
    parser.add_argument(
        "--include-ext",
        metavar="EXT",
        action="append",
        default=[],
        help="File extension to include, repeatable (default: elm)",
    )
    parser.add_argument(
        "--exclude",
        metavar="GLOB",
        action="append",
        default=[],
        help="Glob pattern to exclude, repeatable (e.g. 'generated/')",
    )
    parser.add_argument("--no-respect-gitignore", action="store_true", help="Do not honour .gitignore files")
    parser.add_argument("--follow-symlinks", action="store_true", help="Follow symlinks when walking")
    parser.add_argument("--max-bytes", metavar="BYTES", type=non_negative_int, help="Skip files larger than this")
    parser.add_argument(
        "--encoding",
        choices=sorted(ENCODINGS),
        default=DEFAULT_ENCODING,
        help=f"Encoding to tokenize with (default: {DEFAULT_ENCODING})",
    )
    parser.add_argument("--format", choices=FORMATS, default="table", help="Output format (default: table)")
    parser.add_argument("--top", metavar="N", type=non_negative_int, help="Only show the N largest files by tokens")
    parser.add_argument("--sort", choices=SORT_KEYS, default="path", help="Display order (default: path)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress warnings")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity")
    parser.add_argument("--threads", metavar="N", type=non_negative_int, help="Number of worker threads (0: one per CPU)")
    parser.add_argument("--with-summary", action="store_true", help="Emit the summary line in ndjson mode (default)")
    parser.add_argument("--no-summary", action="store_true", help="Omit the summary line in ndjson mode")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def with_summary(args) -> bool:
    """--no-summary wins when both flags are given."""
    if args.no_summary:
        return False
    return True


def build_options(args) -> ScanOptions:
    return ScanOptions(
        extensions=normalize_extensions(args.include_ext),
        exclude=tuple(args.exclude),
        respect_gitignore=not args.no_respect_gitignore,
        follow_symlinks=args.follow_symlinks,
        max_bytes=args.max_bytes,
        threads=args.threads,
    )


def run(args) -> str:
    """Scans, tokenizes and renders. Raises ConfigurationError on fatal setup problems."""
    options = build_options(args)
    resolve_worker_count(options.threads)
    path_filter = PathFilter(options.exclude_patterns)
    tokenizer = Tokenizer.load(args.encoding)

    roots = [Path(p) for p in args.paths] or [Path(".")]
    candidates = discover_all(roots, options, path_filter)

    stats = aggregate(candidates, tokenizer, max_bytes=options.max_bytes, threads=options.threads)
    summary = build_summary(stats, top=args.top)
    rows = display_stats(stats, args.sort, top=args.top)
    return render(rows, summary, args.format, with_summary=with_summary(args))


def main(argv: Optional[List[str]] = None):
    parser = create_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(quiet=args.quiet, verbosity=args.verbose)

    try:
        output = run(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)

    sys.stdout.write(output)


if __name__ == "__main__":
    main()
