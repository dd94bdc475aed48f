"""
marketlens CLI - technical analysis from the command line.

Usage:
    marketlens analyze SYMBOL [-t TIMEFRAMES] [-f text|json] [-c CONFIG] [-v]
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from adapters import YahooPriceProvider
from config import ConfigError, get_config, load_config, merge_config
from orchestration import TechnicalAnalysisPipeline
from ports import EngineError
from presentation import write_report


def cmd_analyze(args: argparse.Namespace) -> int:
    """Fetch prices and print one analysis report."""
    try:
        config = load_config(Path(args.config)) if args.config else get_config()
        if args.timeframes:
            timeframes = [t for t in args.timeframes.split(",") if t.strip()]
            config = merge_config(config, {"trend": {"timeframes": timeframes}})
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    pipeline = TechnicalAnalysisPipeline(config=config, provider=YahooPriceProvider(config.provider))

    try:
        report = pipeline.fetch_and_analyze(args.symbol.upper())
    except EngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_report(report, args.output, fmt=args.format, include_timing=args.timing)
    if args.output:
        print(f"Report written to {args.output}", file=sys.stderr)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="marketlens",
        description="Technical market analysis engine",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Analyze one symbol")
    analyze_parser.add_argument("symbol", help="Ticker symbol, e.g. AAPL")
    analyze_parser.add_argument(
        "-t", "--timeframes",
        help="Comma-separated timeframes, first is primary (e.g. 1d,1wk)",
    )
    analyze_parser.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    analyze_parser.add_argument("-c", "--config", help="Path to a TOML config file")
    analyze_parser.add_argument("-o", "--output", help="Output file path")
    analyze_parser.add_argument("--timing", action="store_true", help="Include duration in JSON output")
    analyze_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    analyze_parser.set_defaults(func=cmd_analyze)

    args = parser.parse_args(argv)

    # MARKETLENS_* overrides may live in a local .env
    load_dotenv(Path.cwd() / ".env")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
