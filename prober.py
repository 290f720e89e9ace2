#!/usr/bin/env python3
"""
Subdomain Reachability Prober

Decides whether a single hostname answers over HTTP(S). Each hostname is tried
with a fixed, ordered list of connection strategies and the first successful
response wins.

Author: Subdomain Checker Contributors
License: MIT
"""

import asyncio
import logging
from typing import Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# (scheme, method) pairs, tried in this order
STRATEGIES: Tuple[Tuple[str, str], ...] = (
    ("https", "HEAD"),
    ("http", "HEAD"),
    ("https", "GET"),
    ("http", "GET"),
)


class Prober:
    """
    Reachability check for one hostname with HTTPS/HTTP and HEAD/GET fallbacks.

    HTTPS is tried before HTTP, and a header-only HEAD before a full GET at each
    protocol tier. Every attempt gets its own timeout, so a slow attempt only
    costs that attempt.

    Args:
        client (httpx.AsyncClient): Shared client used for every request
        timeout (float): Seconds allowed for each individual attempt
    """
    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self.client = client
        self.timeout = timeout

    async def attempt(self, scheme: str, method: str, hostname: str) -> bool:
        """Issue one request and report whether it ended in a 2xx response"""
        url = f"{scheme}://{hostname}"
        try:
            response = await asyncio.wait_for(
                self.client.request(method, url),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.debug(f"{method} {url} timed out after {self.timeout}s")
            return False
        except Exception as e:
            logger.debug(f"{method} {url} failed: {type(e).__name__}: {str(e)}")
            return False

        if response.is_success:
            return True

        logger.debug(f"{method} {url} returned {response.status_code}")
        return False

    async def probe(self, hostname: str) -> bool:
        """Return True as soon as one strategy succeeds, False if all of them fail"""
        for scheme, method in STRATEGIES:
            if await self.attempt(scheme, method, hostname):
                logger.debug(f"{hostname} is up ({method} {scheme})")
                return True

        logger.debug(f"{hostname} is down after {len(STRATEGIES)} attempts")
        return False
