#!/usr/bin/env python3
"""
Batch Scheduler for Availability Checks

Runs a prober over an arbitrary number of hostnames in fixed-size batches.
Hostnames inside a batch are probed concurrently, batches run one after
another, and a caller-owned cancellation flag is checked before each batch
starts.

Author: Subdomain Checker Contributors
License: MIT
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10


class ProbeStatus(Enum):
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"  # batch never started


class Completion(Enum):
    COMPLETED = "completed"
    STOPPED_BY_USER = "stopped_by_user"


@dataclass(frozen=True)
class ProbeResult:
    hostname: str
    status: ProbeStatus

    @property
    def is_up(self) -> Optional[bool]:
        """True/False for a finished probe, None when the host was never checked"""
        if self.status is ProbeStatus.UNKNOWN:
            return None
        return self.status is ProbeStatus.UP


@dataclass(frozen=True)
class RunOutcome:
    """Per-host results in input order plus how the run ended"""
    results: Tuple[ProbeResult, ...]
    completion: Completion

    def __len__(self) -> int:
        return len(self.results)

    @property
    def stopped_by_user(self) -> bool:
        return self.completion is Completion.STOPPED_BY_USER

    @property
    def live(self) -> List[str]:
        return [r.hostname for r in self.results if r.status is ProbeStatus.UP]

    @property
    def dead(self) -> List[str]:
        return [r.hostname for r in self.results if r.status is ProbeStatus.DOWN]

    @property
    def unknown(self) -> List[str]:
        return [r.hostname for r in self.results if r.status is ProbeStatus.UNKNOWN]

    def status_of(self, hostname: str) -> ProbeStatus:
        for result in self.results:
            if result.hostname == hostname:
                return result.status
        raise KeyError(hostname)


class BatchScheduler:
    """
    Drives a prober across the whole candidate list under a concurrency cap.

    The prober only needs an ``async probe(hostname) -> bool`` method; it knows
    nothing about batching or cancellation.

    Cancellation is coarse: the flag is read before each batch, and a batch that
    has started always runs to completion. Hostnames in batches that never
    started are reported as ``ProbeStatus.UNKNOWN``.

    Args:
        prober: Object with an ``async probe(hostname) -> bool`` method
    """
    def __init__(self, prober):
        self.prober = prober

    async def run(
        self,
        hostnames: Sequence[str],
        concurrency_limit: int = DEFAULT_CONCURRENCY,
        cancel_flag: Optional[threading.Event] = None,
        on_progress: Optional[Callable[[int, int], None]] = None
    ) -> RunOutcome:
        """
        Probe every hostname and return the results in input order.

        Args:
            hostnames: Ordered, already deduplicated hostnames
            concurrency_limit: Batch size, i.e. probes in flight at once
            cancel_flag: Anything with ``is_set()`` (``threading.Event``,
                ``asyncio.Event``); checked before each batch
            on_progress: Called as ``on_progress(processed, total)`` after
                every finished batch
        """
        if hostnames is None:
            raise TypeError("hostnames must be a sequence of strings, not None")
        if isinstance(hostnames, str):
            raise TypeError("hostnames must be a sequence of strings, not a single string")
        if isinstance(concurrency_limit, bool) or not isinstance(concurrency_limit, int):
            raise TypeError(f"concurrency_limit must be an int, got {type(concurrency_limit).__name__}")
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")

        hostnames = list(hostnames)
        total = len(hostnames)
        results: List[ProbeResult] = []
        completion = Completion.COMPLETED

        for start in range(0, total, concurrency_limit):
            if cancel_flag is not None and cancel_flag.is_set():
                completion = Completion.STOPPED_BY_USER
                logger.info(f"Run stopped by user after {start}/{total} hosts")
                break

            batch = hostnames[start:start + concurrency_limit]
            results.extend(await self._run_batch(batch))

            if on_progress is not None:
                on_progress(len(results), total)

        # Hosts in batches that never started
        for hostname in hostnames[len(results):]:
            results.append(ProbeResult(hostname, ProbeStatus.UNKNOWN))

        return RunOutcome(results=tuple(results), completion=completion)

    async def _run_batch(self, batch: List[str]) -> List[ProbeResult]:
        """Probe one batch concurrently; a failing probe only affects its own host"""
        outcomes = await asyncio.gather(
            *(self.prober.probe(hostname) for hostname in batch),
            return_exceptions=True
        )

        batch_results = []
        for hostname, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Probe for {hostname} failed with exception: {type(outcome).__name__}: {outcome}")
                status = ProbeStatus.DOWN
            else:
                status = ProbeStatus.UP if outcome else ProbeStatus.DOWN
            batch_results.append(ProbeResult(hostname, status))

        return batch_results
