#!/usr/bin/env python3
"""Log Analyzer - Entry point"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from loganalyzer import VERSION, LogAnalyzer, print_report
from loganalyzer.config import IP_RISK_THRESHOLD, MAX_DIAGNOSTICS


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Log Analyzer - Security log analysis with CVSS 3.1 scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("logfile", help="Log file to analyze")
    parser.add_argument("-o", "--output", help="Output file (JSON)")
    parser.add_argument("-j", "--json", action="store_true", help="JSON output only")
    parser.add_argument("--ip-threshold", type=int, default=IP_RISK_THRESHOLD,
                        help="Occurrences at which an IP is high risk")
    parser.add_argument("--max-errors", type=int, default=MAX_DIAGNOSTICS,
                        help="Parse diagnostics to report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"LogAnalyzer v{VERSION}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    console = None if args.json else Console()
    analyzer = LogAnalyzer(ip_threshold=args.ip_threshold,
                           max_diagnostics=args.max_errors, console=console)

    try:
        report = analyzer.analyze_file(args.logfile).to_dict()
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_report(report, console)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(report, f, indent=2)
        if console is not None:
            console.print(f"\n[green]Report saved to:[/] {args.output}")


if __name__ == "__main__":
    main()
