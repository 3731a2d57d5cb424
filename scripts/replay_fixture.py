#!/usr/bin/env python
"""Run the pipeline over a recorded fixture and print the remapped result."""

import argparse
import json
import logging
import sys
from pathlib import Path

from twoslashmap.errors import FixtureError, SourceMapError
from twoslashmap.pipeline import TwoslashOptions, run_fixture


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("fixture", type=Path, help="JSON fixture with source, rewrite and analysis")
    parser.add_argument(
        "--shims-dir",
        help="Directory holding the Svelte shim declarations referenced from generated code",
    )
    parser.add_argument("--language", default="js", help="Language id handed to the analysis engine")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log dropped results")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = TwoslashOptions(language=args.language)
    if args.shims_dir:
        options = options.with_shims_dir(args.shims_dir)

    try:
        result = run_fixture(args.fixture, options=options)
    except (FixtureError, SourceMapError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(result.to_dict(), indent=args.indent))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
