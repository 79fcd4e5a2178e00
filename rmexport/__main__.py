"""
reMarkable Notebook Export CLI

Usage:
    python -m rmexport notebook.zip [-o notebook.pdf]
    python -m rmexport notebook.zip --page 3 -o page-3.pdf
    python -m rmexport page.rm --custom -o page.pdf
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path

import tomli

from .config import DEFAULT_CONFIG, load_config
from .errors import ExportError
from .orchestrator import render_custom, render_full_document, render_page


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Export reMarkable notebooks to PDF",
        prog="rmexport"
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Zipped notebook, or a single .rm page with --custom"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output PDF (default: input name with .pdf extension)"
    )
    parser.add_argument(
        "-p", "--page",
        type=int,
        help="Render only this page (1-indexed) with the single-page renderer"
    )
    parser.add_argument(
        "--custom",
        action="store_true",
        help="Input is a raw .rm page record"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="TOML file with [page] and [stroke] settings"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.exists():
        print(f"File not found: {args.input}", file=sys.stderr)
        return 1

    output_path = args.output or args.input.with_suffix(".pdf")
    try:
        config = load_config(args.config) if args.config else DEFAULT_CONFIG
    except (OSError, ValueError, tomli.TOMLDecodeError) as e:
        print(f"Bad config {args.config}: {e}", file=sys.stderr)
        return 1

    print(f"Converting {args.input.name}...", end=" ", flush=True)
    try:
        if args.custom:
            with open(args.input, "rb") as reader, open(output_path, "wb") as writer:
                segments = render_custom(reader, writer, config)
            print(f"OK ({segments} segments)")
        elif args.page is not None:
            result = render_page(args.input, args.page - 1, config)
            with open(output_path, "wb") as writer:
                shutil.copyfileobj(result, writer)
            result.close()
            print(f"OK (page {args.page})")
        else:
            with render_full_document(args.input, output_path):
                pass
            print("OK")
    except ExportError as e:
        print("FAILED", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(f"Output: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
