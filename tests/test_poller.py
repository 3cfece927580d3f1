"""Tests for the metrics poller"""
import asyncio
import httpx
import pytest
from unittest.mock import AsyncMock, patch

from app.poller import MetricsPoller
from config import Config
from metrics.query import values_of


METRICS_URL = "http://metrics.test/metrics"


def make_poller(handler, **overrides):
    config = Config(metrics_url=METRICS_URL, **overrides)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MetricsPoller(config, client=client)


class TestPollOnce:
    """Test single fetch-and-parse cycles"""

    @pytest.mark.asyncio
    async def test_successful_poll_sets_snapshot(self, example_text):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, text=example_text)

        poller = make_poller(handler)

        assert await poller.poll_once() is True
        assert requests[0].url == METRICS_URL
        assert poller.snapshot.source_url == METRICS_URL
        assert poller.snapshot.samples_count == 3
        assert values_of(poller.snapshot.families, "jira_open_tickets_total") == [7]
        assert poller.poll_count == 1
        assert poller.poll_errors == 0
        assert poller.last_error is None
        assert poller.last_success_time == poller.snapshot.fetched_at

    @pytest.mark.asyncio
    async def test_new_snapshot_replaces_previous(self):
        bodies = iter([
            "# HELP a First\na 1\n",
            "# HELP b Second\nb 2\n",
        ])
        poller = make_poller(lambda request: httpx.Response(200, text=next(bodies)))

        await poller.poll_once()
        first = poller.snapshot
        await poller.poll_once()

        assert poller.snapshot is not first
        assert [family.name for family in poller.snapshot.families] == ["b"]

    @pytest.mark.asyncio
    async def test_http_error_keeps_previous_snapshot(self, example_text):
        responses = iter([
            httpx.Response(200, text=example_text),
            httpx.Response(500, text="boom"),
        ])
        poller = make_poller(lambda request: next(responses))

        await poller.poll_once()
        snapshot = poller.snapshot
        assert await poller.poll_once() is True

        assert poller.snapshot is snapshot
        assert poller.poll_count == 2
        assert poller.poll_errors == 1
        assert "HTTPStatusError" in poller.last_error

    @pytest.mark.asyncio
    async def test_transport_error_is_recorded(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        poller = make_poller(handler)
        await poller.poll_once()

        assert poller.snapshot is None
        assert poller.poll_errors == 1
        assert "connection refused" in poller.last_error

    @pytest.mark.asyncio
    async def test_error_clears_after_success(self, example_text):
        responses = iter([
            httpx.Response(503),
            httpx.Response(200, text=example_text),
        ])
        poller = make_poller(lambda request: next(responses))

        await poller.poll_once()
        assert poller.last_error is not None
        await poller.poll_once()

        assert poller.last_error is None
        assert poller.snapshot is not None

    @pytest.mark.asyncio
    async def test_malformed_body_does_not_raise(self):
        poller = make_poller(lambda request: httpx.Response(200, text="???\n{\n# HELP\n"))

        await poller.poll_once()

        assert poller.snapshot.families == []
        assert poller.poll_errors == 0


class TestSingleFlight:
    """Test that only one fetch is outstanding at a time"""

    @pytest.mark.asyncio
    async def test_overlapping_poll_is_skipped(self, example_text):
        release = asyncio.Event()
        calls = []

        async def handler(request):
            calls.append(request)
            await release.wait()
            return httpx.Response(200, text=example_text)

        poller = make_poller(handler)
        first = asyncio.create_task(poller.poll_once())
        await asyncio.sleep(0)

        assert poller.in_flight is True
        assert await poller.poll_once() is False
        assert poller.skipped_polls == 1

        release.set()
        assert await first is True
        assert len(calls) == 1
        assert poller.poll_count == 1
        assert poller.in_flight is False


class TestLifecycle:
    """Test start and stop of the repeating task"""

    @pytest.mark.asyncio
    async def test_start_polls_immediately_and_stop_cancels(self, example_text):
        poller = make_poller(lambda request: httpx.Response(200, text=example_text), poll_interval=60)

        poller.start()
        assert poller.is_running is True
        for _ in range(50):
            if poller.snapshot is not None:
                break
            await asyncio.sleep(0.01)

        await poller.stop()

        assert poller.snapshot is not None
        assert poller.poll_count == 1
        assert poller.is_running is False

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, example_text):
        poller = make_poller(lambda request: httpx.Response(200, text=example_text), poll_interval=60)

        poller.start()
        task = poller._task
        poller.start()

        assert poller._task is task
        await poller.stop()

    @pytest.mark.asyncio
    async def test_stop_closes_owned_client(self):
        poller = MetricsPoller(Config(metrics_url=METRICS_URL))
        client = poller.client

        await poller.stop()

        assert client.is_closed is True

    @pytest.mark.asyncio
    async def test_stop_leaves_injected_client_open(self, example_text):
        poller = make_poller(lambda request: httpx.Response(200, text=example_text))
        client = poller.client

        await poller.stop()

        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_end_loop(self):
        poller = make_poller(lambda request: httpx.Response(200, text=""), poll_interval=60)

        with patch.object(poller, "poll_once", AsyncMock(side_effect=RuntimeError("parser blew up"))):
            poller.start()
            for _ in range(50):
                if poller.poll_errors:
                    break
                await asyncio.sleep(0.01)

            assert poller.poll_errors == 1
            assert poller.last_error == "RuntimeError: parser blew up"
            assert poller.is_running is True

            await poller.stop()

        assert poller.is_running is False
