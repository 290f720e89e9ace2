#!/usr/bin/env python3
"""
Command Line Interface for the Subdomain Availability Checker

This script checks a list of subdomains for HTTP(S) reachability and prints a
summary grouped by subdomain level. Press Ctrl+C once to stop after the current
batch; hosts that were not reached are reported as unknown.

Usage:
    python cli.py domains.txt [options]

Example:
    python cli.py domains.txt --domain example.com --concurrent 20

Author: Subdomain Checker Contributors
License: MIT
"""

import asyncio
import argparse
import logging
import signal
import threading
import time
from typing import List, Optional

from rich.console import Console

from batch_scheduler import DEFAULT_CONCURRENCY
from prober import DEFAULT_TIMEOUT
from subdomain_checker import SubdomainChecker, filter_by_root_domain, load_domains_from_file

logger = logging.getLogger(__name__)


def configure_logging(log_file: str):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Subdomain Availability Checker')
    parser.add_argument('domains_file', help='Path to file containing subdomains (one per line)')
    parser.add_argument('--domain', '-d', default=None,
                       help='Root domain; keeps only its subdomains and groups results by level')
    parser.add_argument('--concurrent', '-c', type=int, default=DEFAULT_CONCURRENCY,
                       help=f'Subdomains checked at once (default: {DEFAULT_CONCURRENCY})')
    parser.add_argument('--timeout', '-t', type=float, default=DEFAULT_TIMEOUT,
                       help=f'Seconds allowed for each probe attempt (default: {DEFAULT_TIMEOUT:g})')
    parser.add_argument('--skip-check', action='store_true',
                       help='List subdomains without checking availability')
    parser.add_argument('--log-file', default='subdomain_checker.log',
                       help='Log file path (default: subdomain_checker.log)')
    return parser


def install_stop_handler(stop_requested: threading.Event, console: Console):
    """Route the first Ctrl+C to the stop flag instead of aborting the run"""
    loop = asyncio.get_running_loop()

    def request_stop():
        console.print("[yellow]Stop requested, finishing current batch (Ctrl+C again to abort)...[/yellow]")
        logger.info("Stop requested by user")
        stop_requested.set()
        # Next Ctrl+C gets the default KeyboardInterrupt
        loop.remove_signal_handler(signal.SIGINT)

    try:
        loop.add_signal_handler(signal.SIGINT, request_stop)
    except NotImplementedError:
        # Windows event loops have no signal handler support
        logger.warning("Graceful stop unavailable on this platform; Ctrl+C aborts the run")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.concurrent < 1:
        parser.error('--concurrent must be at least 1')
    if args.timeout <= 0:
        parser.error('--timeout must be positive')

    configure_logging(args.log_file)
    console = Console()

    # Load domains from file
    domains = load_domains_from_file(args.domains_file)
    if args.domain:
        domains = filter_by_root_domain(domains, args.domain)
    if not domains:
        console.print(f"[red]Error: No subdomains loaded from {args.domains_file}[/red]")
        return 1

    checker = SubdomainChecker(max_concurrent=args.concurrent, timeout=args.timeout, console=console)

    async def run_check():
        stop_requested = threading.Event()
        install_stop_handler(stop_requested, console)

        console.print(f"[bold blue]🚀 Found {len(domains)} unique subdomains[/bold blue]")
        start_time = time.time()

        outcome = await checker.check_subdomains(
            domains,
            cancel_flag=stop_requested,
            skip_check=args.skip_check
        )

        checker.print_results(outcome, root_domain=args.domain)
        summary = checker.get_check_summary(outcome, start_time, skip_check=args.skip_check)
        checker.print_summary(summary)

    # Run the async check
    asyncio.run(run_check())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
