"""Tests for prober.Prober."""

import asyncio

import httpx
import pytest

from prober import STRATEGIES, Prober


def _recording_handler(respond):
    """Wrap an async respond(request) so every request is recorded as (method, scheme)."""
    attempts = []

    async def handler(request):
        attempts.append((request.method, request.url.scheme))
        return await respond(request)

    return handler, attempts


def test_strategy_order():
    assert STRATEGIES == (
        ("https", "HEAD"),
        ("http", "HEAD"),
        ("https", "GET"),
        ("http", "GET"),
    )


def test_rejects_non_positive_timeout():
    with pytest.raises(ValueError):
        Prober(client=None, timeout=0)


@pytest.mark.asyncio
async def test_first_strategy_success_skips_the_rest(mock_client):
    async def respond(request):
        return httpx.Response(200)

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client).probe("www.example.com") is True

    assert attempts == [("HEAD", "https")]


@pytest.mark.asyncio
async def test_all_strategies_fail_makes_four_attempts_in_order(mock_client):
    async def respond(request):
        return httpx.Response(503)

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client).probe("dead.example.com") is False

    assert attempts == [
        ("HEAD", "https"),
        ("HEAD", "http"),
        ("GET", "https"),
        ("GET", "http"),
    ]


@pytest.mark.asyncio
async def test_two_timeouts_then_success(mock_client):
    async def respond(request):
        if request.method == "HEAD":
            await asyncio.sleep(5)
        return httpx.Response(200)

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client, timeout=0.05).probe("slow.example.com") is True

    assert attempts == [("HEAD", "https"), ("HEAD", "http"), ("GET", "https")]


@pytest.mark.asyncio
async def test_network_errors_fall_through_to_plain_http(mock_client):
    async def respond(request):
        if request.url.scheme == "https":
            raise httpx.ConnectError("TLS handshake failed", request=request)
        return httpx.Response(204)

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client).probe("legacy.example.com") is True

    assert attempts == [("HEAD", "https"), ("HEAD", "http")]


@pytest.mark.asyncio
async def test_head_not_allowed_falls_back_to_get(mock_client):
    async def respond(request):
        if request.method == "HEAD":
            return httpx.Response(405)
        return httpx.Response(200, text="<html>ok</html>")

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client).probe("api.example.com") is True

    assert attempts == [("HEAD", "https"), ("HEAD", "http"), ("GET", "https")]


@pytest.mark.asyncio
async def test_redirect_to_success_counts_as_up(mock_client):
    async def respond(request):
        if request.url.path == "/":
            return httpx.Response(301, headers={"Location": "https://www.example.com/home"})
        return httpx.Response(200)

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client).probe("www.example.com") is True

    assert attempts == [("HEAD", "https"), ("HEAD", "https")]


@pytest.mark.asyncio
async def test_unexpected_exception_is_absorbed(mock_client):
    async def respond(request):
        raise RuntimeError("something odd")

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        assert await Prober(client).probe("odd.example.com") is False

    assert len(attempts) == 4


@pytest.mark.asyncio
async def test_probe_is_idempotent(mock_client):
    async def respond(request):
        if request.url.scheme == "http" and request.method == "GET":
            return httpx.Response(200)
        return httpx.Response(404)

    handler, attempts = _recording_handler(respond)
    async with mock_client(handler) as client:
        prober = Prober(client)
        first = await prober.probe("flaky.example.com")
        second = await prober.probe("flaky.example.com")

    assert first is second is True
    assert len(attempts) == 8


@pytest.mark.asyncio
async def test_attempt_builds_url_from_scheme_and_host(mock_client):
    seen = []

    async def handler(request):
        seen.append((request.url.scheme, request.url.host))
        return httpx.Response(200)

    async with mock_client(handler) as client:
        assert await Prober(client).attempt("http", "GET", "shop.example.com") is True

    assert seen == [("http", "shop.example.com")]
