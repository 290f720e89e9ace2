#!/usr/bin/env python3
"""
Subdomain Availability Checker

Checks a list of subdomains for HTTP(S) reachability and reports which ones are
live, grouped by how deep they sit under the root domain. Probing runs in
bounded-concurrency batches with a live progress bar, and a run can be stopped
between batches.

Author: Subdomain Checker Contributors
License: MIT
"""

import logging
import threading
import time
from typing import Dict, Iterable, List, Optional

import httpx
from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from batch_scheduler import (
    DEFAULT_CONCURRENCY,
    BatchScheduler,
    Completion,
    ProbeResult,
    ProbeStatus,
    RunOutcome,
)
from prober import DEFAULT_TIMEOUT, Prober

logger = logging.getLogger(__name__)

CATEGORY_TITLES = {
    'www': "WWW Subdomains",
    'root_level': "Root Level Subdomains",
    'multi_level': "Multi-Level Subdomains",
}

STATUS_MARKERS = {
    ProbeStatus.UP: "[green]\\[UP][/green]",
    ProbeStatus.DOWN: "[red]\\[DOWN][/red]",
    ProbeStatus.UNKNOWN: "[yellow]\\[?][/yellow]",
}


class SubdomainChecker:
    """
    Availability checker for a list of subdomains.

    Features:
    - HTTPS/HTTP and HEAD/GET fallbacks per host with a per-attempt timeout
    - Fixed-size concurrent batches with a rich progress bar
    - Cooperative stop between batches via a caller-owned flag
    - Summary and per-category result tables

    Args:
        max_concurrent (int): Hosts probed at once (batch size)
        timeout (float): Seconds allowed for each probe attempt
        console (Console): Optional rich console for output
        transport (httpx.AsyncBaseTransport): Optional transport for the HTTP client
    """
    def __init__(
        self,
        max_concurrent: int = DEFAULT_CONCURRENCY,
        timeout: float = DEFAULT_TIMEOUT,
        console: Optional[Console] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.max_concurrent = max_concurrent
        self.timeout = timeout
        self.console = console or Console()
        self.transport = transport

    def _make_client(self) -> httpx.AsyncClient:
        """Build the shared HTTP client used by every probe in a run"""
        limits = httpx.Limits(
            max_keepalive_connections=self.max_concurrent,
            max_connections=self.max_concurrent * 2
        )
        return httpx.AsyncClient(
            limits=limits,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self.transport
        )

    async def check_subdomains(
        self,
        hostnames: List[str],
        cancel_flag: Optional[threading.Event] = None,
        skip_check: bool = False
    ) -> RunOutcome:
        """Check every hostname and return the per-host outcome in input order"""
        if hostnames is None:
            raise TypeError("hostnames must be a list of strings, not None")
        if isinstance(hostnames, str):
            raise TypeError("hostnames must be a list of strings, not a single string")

        if skip_check:
            self.console.print("[yellow]Availability check skipped[/yellow]")
            return RunOutcome(
                results=tuple(ProbeResult(h, ProbeStatus.UNKNOWN) for h in hostnames),
                completion=Completion.COMPLETED
            )

        if not hostnames:
            self.console.print("[yellow]No subdomains to check[/yellow]")
            return RunOutcome(results=(), completion=Completion.COMPLETED)

        self.console.print(
            f"[blue]Checking {len(hostnames)} subdomains, {self.max_concurrent} at a time[/blue]"
        )
        logger.info(f"Starting availability check of {len(hostnames)} hosts (batch size {self.max_concurrent})")

        async with self._make_client() as client:
            scheduler = BatchScheduler(Prober(client, timeout=self.timeout))

            with Progress(console=self.console) as progress:
                task = progress.add_task("[cyan]Checking availability...", total=len(hostnames))

                def on_progress(processed: int, total: int):
                    progress.update(task, completed=processed)

                outcome = await scheduler.run(
                    hostnames,
                    concurrency_limit=self.max_concurrent,
                    cancel_flag=cancel_flag,
                    on_progress=on_progress
                )

        logger.info(
            f"Availability check finished ({outcome.completion.value}): "
            f"{len(outcome.live)} up, {len(outcome.dead)} down, {len(outcome.unknown)} unknown"
        )
        return outcome

    def get_check_summary(self, outcome: RunOutcome, start_time: float, skip_check: bool = False) -> Dict:
        """Generate summary statistics for a finished run"""
        total = len(outcome)
        live = len(outcome.live)

        return {
            'total': total,
            'live': live,
            'dead': len(outcome.dead),
            'unknown': len(outcome.unknown),
            'live_percentage': f"{live / total * 100:.1f}" if total else "N/A",
            'completion': outcome.completion,
            'check_skipped': skip_check,
            'duration': time.time() - start_time,
        }

    def print_summary(self, summary: Dict):
        """Print formatted run summary"""
        table = Table(title="🔍 Subdomain Availability Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Total subdomains", str(summary['total']))
        if summary['check_skipped']:
            table.add_row("Availability check", "skipped")
        else:
            table.add_row("Live (🟢)", str(summary['live']))
            table.add_row("Dead (🔴)", str(summary['dead']))
            if summary['unknown']:
                table.add_row("Not checked", str(summary['unknown']))
            percentage = summary['live_percentage']
            table.add_row("Live percentage", percentage if percentage == "N/A" else f"{percentage}%")
        table.add_row("Duration", f"{summary['duration']:.2f} seconds")

        self.console.print(table)

        if summary['completion'] is Completion.STOPPED_BY_USER:
            self.console.print("[yellow]⏹️ Scan stopped by user.[/yellow]")
        elif summary['check_skipped']:
            self.console.print("[green]✅ Scan complete! (Availability check skipped)[/green]")
        else:
            self.console.print("[green]✅ Scan complete![/green]")

    def print_results(self, outcome: RunOutcome, root_domain: Optional[str] = None):
        """Print per-host results, grouped by category when the root domain is known"""
        if root_domain:
            groups = categorize_subdomains([r.hostname for r in outcome.results], root_domain)
            titled = [(CATEGORY_TITLES[key], hosts) for key, hosts in groups.items()]
        else:
            titled = [("Subdomains", [r.hostname for r in outcome.results])]

        statuses = {r.hostname: r.status for r in outcome.results}
        for title, hosts in titled:
            table = Table(title=f"{title} ({len(hosts)})")
            table.add_column("Subdomain", style="cyan")
            table.add_column("Status")
            if not hosts:
                table.add_row("None", "")
            for host in hosts:
                table.add_row(host, STATUS_MARKERS[statuses[host]])
            self.console.print(table)


def dedupe_hostnames(hostnames: Iterable[str]) -> List[str]:
    """Drop repeated hostnames, keeping the first occurrence of each"""
    return list(dict.fromkeys(hostnames))


def filter_by_root_domain(hostnames: Iterable[str], root_domain: str) -> List[str]:
    """Keep only hostnames that end with the root domain"""
    return [h for h in hostnames if h.endswith(root_domain)]


def categorize_subdomains(subdomains: Iterable[str], root_domain: str) -> Dict[str, List[str]]:
    """
    Sort subdomains into www, root-level and multi-level buckets.

    A root-level subdomain has exactly one label more than the root domain
    (``api.example.com`` under ``example.com``); ``www.`` names always land in
    the www bucket regardless of depth.
    """
    categories = {'www': [], 'root_level': [], 'multi_level': []}
    root_labels = len(root_domain.split('.'))

    for sub in subdomains:
        if sub.startswith('www.'):
            categories['www'].append(sub)
        elif len(sub.split('.')) == root_labels + 1:
            categories['root_level'].append(sub)
        else:
            categories['multi_level'].append(sub)

    return categories


def load_domains_from_file(file_path: str) -> List[str]:
    """Load domains from a text file (one per line), dropping duplicates"""
    domains = []
    try:
        with open(file_path, 'r') as f:
            for line in f:
                domain = line.strip()
                if domain and not domain.startswith('#'):
                    domains.append(domain)
    except FileNotFoundError:
        logger.error(f"Domain file not found: {file_path}")
        return []

    unique = dedupe_hostnames(domains)
    logger.info(f"Loaded {len(unique)} unique domains from {file_path}")
    return unique
