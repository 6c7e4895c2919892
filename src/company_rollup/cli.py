"""Command-line interface for rolling up audit score exports.

Provides subcommands: `run` and `preview`. Each command is implemented as a
`cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from company_rollup.aggregate.rollup import MissingGroupKeyError
from company_rollup.config import get_settings
from company_rollup.export.write_csv import format_records
from company_rollup.ingest.parse_csv import InputParseError
from company_rollup.logging_config import configure_logging
from company_rollup.session import RollupSession

log = logging.getLogger(__name__)


# --------------------------------------------------
# RUN
# --------------------------------------------------
def cmd_run(args: argparse.Namespace) -> int:
    """Load `args.input`, roll it up and export the CSV artifact.

    Args:
        args: argparse namespace with `input`, `out_dir`, `name`.
    """
    s = get_settings()
    out_dir = args.out_dir or s.output_dir
    name = args.name or s.output_name

    session = RollupSession()
    session.load(args.input)
    path = session.process_and_export(out_dir, name)

    log.info("Rollup written to %s", path)
    return 0


# --------------------------------------------------
# PREVIEW
# --------------------------------------------------
def cmd_preview(args: argparse.Namespace) -> int:
    """Print the first `args.limit` rolled-up rows without writing a file."""
    session = RollupSession()
    session.load(args.input)
    rows = session.process() or []

    df = format_records(rows[: args.limit])
    with pd.option_context("display.max_columns", None, "display.width", None):
        print(df.to_string(index=False))

    log.info("Previewed %d of %d companies", len(df), len(rows))
    return 0


# --------------------------------------------------
# CLI
# --------------------------------------------------
def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="rollup-companies")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run")
    p_run.add_argument("input", type=Path)
    p_run.add_argument("--out-dir", type=Path, default=None)
    p_run.add_argument("--name", default=None)

    p_preview = sub.add_parser("preview")
    p_preview.add_argument("input", type=Path)
    p_preview.add_argument("--limit", type=_positive_int, default=10)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    args = build_parser().parse_args(argv)
    s = get_settings()
    configure_logging(s.log_path, s.log_level)

    try:
        if args.cmd == "run":
            return cmd_run(args)
        if args.cmd == "preview":
            return cmd_preview(args)
    except (FileNotFoundError, InputParseError, MissingGroupKeyError) as exc:
        log.error("%s", exc)
        return 1
    raise SystemExit(2)


if __name__ == "__main__":
    sys.exit(main())
