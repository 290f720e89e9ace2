"""Shared pytest fixtures for the subdomain checker test suite."""

import asyncio
import io

import httpx
import pytest
from rich.console import Console


class FakeProber:
    """Stand-in prober that records calls and overlap instead of touching the network."""

    def __init__(self, up=(), crash=(), delays=None, on_probe=None):
        self.up = set(up)
        self.crash = set(crash)
        self.delays = delays or {}
        self.on_probe = on_probe
        self.calls = []
        self.events = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def probe(self, hostname):
        self.calls.append(hostname)
        self.events.append(("start", hostname))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.on_probe is not None:
                self.on_probe(hostname)
            await asyncio.sleep(self.delays.get(hostname, 0))
            if hostname in self.crash:
                raise RuntimeError(f"probe crashed for {hostname}")
            return hostname in self.up
        finally:
            self.in_flight -= 1
            self.events.append(("end", hostname))


@pytest.fixture
def fake_prober():
    """Return the FakeProber class so tests can script their own instance."""
    return FakeProber


@pytest.fixture
def mock_client():
    """Return a factory building an httpx.AsyncClient backed by a MockTransport handler."""
    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
    return _make


@pytest.fixture
def quiet_console():
    """Return a rich Console that writes into a buffer."""
    return Console(file=io.StringIO(), width=120)
