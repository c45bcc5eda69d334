from __future__ import annotations

import argparse
from datetime import date
import json
import logging
from pathlib import Path

import yaml

from sarif_filter.config import load_config
from sarif_filter.engine import INVALID_DATE_POLICIES, apply_suppressions
from sarif_filter.loader import LoadError, load_report, load_suppression_table
from sarif_filter.reporting import dump_report, suppression_summary

LOGGER = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    numeric = getattr(logging, level.upper(), logging.WARNING)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger().setLevel(numeric)


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sarif-filter", description="A tool for filtering identities from SARIF files")
    subparsers = parser.add_subparsers(dest="command", required=True)

    cmd_filter = subparsers.add_parser("filter", help="Filter identities from SARIF file")
    cmd_filter.add_argument("-s", "--sarif", default=None, help="Path or URL to the SARIF file")
    cmd_filter.add_argument(
        "-i",
        "--identities-file",
        default=None,
        help="Path or URL to the YAML file with identities. Format: identities: {fingerprint: {enabled, reason, expires-on}}",
    )
    cmd_filter.add_argument(
        "--now",
        type=_parse_day,
        default=None,
        help="Evaluate expirations as of this date (YYYY-MM-DD). Defaults to today.",
    )
    cmd_filter.add_argument(
        "--invalid-date",
        choices=list(INVALID_DATE_POLICIES),
        default=None,
        help="How to treat an unparsable expires-on: suppress keeps the suppression, revive lifts it.",
    )
    cmd_filter.add_argument("--config", default=None, help="Path to YAML config (default: sarif-filter.yaml if present)")
    cmd_filter.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds for URL sources.")
    cmd_filter.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).")
    cmd_filter.add_argument("--out", default=None, help="Write the filtered SARIF here instead of stdout.")
    cmd_filter.add_argument("--summary-out", default=None, help="Optional JSON path for the suppression summary.")
    return parser.parse_args(argv)


def run_filter(args: argparse.Namespace) -> int:
    try:
        config = load_config(
            args.config,
            overrides={
                "http_timeout_seconds": args.timeout,
                "invalid_date_policy": args.invalid_date,
                "log_level": args.log_level,
            },
        )
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1
    setup_logging(config.log_level)

    if not args.sarif or not args.identities_file:
        LOGGER.error("Please provide both --sarif and --identities-file flags")
        return 1

    try:
        report = load_report(args.sarif, config.http_timeout_seconds)
        table = load_suppression_table(args.identities_file, config.http_timeout_seconds)
    except LoadError as exc:
        LOGGER.error("%s", exc)
        return 1

    today = args.now or date.today()
    outcome = apply_suppressions(report, table, today, config.invalid_date_policy)
    LOGGER.info(
        "Suppressed %d finding(s) as of %s; %d of %d suppression entries unused",
        len(outcome.suppressed),
        today.isoformat(),
        len(outcome.unused_identities),
        len(table),
    )

    rendered = dump_report(outcome.report, config.indent)
    try:
        if args.out:
            Path(args.out).write_text(rendered + "\n", encoding="utf-8")
        if args.summary_out:
            Path(args.summary_out).write_text(json.dumps(suppression_summary(outcome), indent=2))
    except OSError as exc:
        LOGGER.error("Failed to write output: %s", exc)
        return 1
    if not args.out:
        print(rendered)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    if args.command == "filter":
        return run_filter(args)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
