from __future__ import annotations

import asyncio

import pytest

from gronk_tui.data import Snapshot
from gronk_tui.fetcher import FetchError
from gronk_tui.monitor import Handoff, Monitor, poll_snapshots


class CountingSource:
    def __init__(self, *, fail_on: int | None = None) -> None:
        self.calls = 0
        self.fail_on = fail_on

    async def fetch_snapshot(self, machine: str) -> Snapshot:
        self.calls += 1
        if self.fail_on is not None and self.calls >= self.fail_on:
            raise FetchError("connection refused")
        return Snapshot(updated=self.calls)


async def _yield(times: int = 20) -> None:
    for _ in range(times):
        await asyncio.sleep(0)


def test_handoff_send_waits_for_receiver():
    async def scenario() -> list[int]:
        handoff: Handoff[int] = Handoff()
        sender = asyncio.create_task(handoff.send(7))
        await _yield()
        assert not sender.done()
        assert handoff.pending()
        value = await handoff.receive()
        await _yield()
        assert sender.done()
        assert not handoff.pending()
        return [value]

    assert asyncio.run(scenario()) == [7]


def test_poller_never_runs_ahead_of_receiver():
    async def scenario() -> None:
        source = CountingSource()
        handoff: Handoff[Snapshot] = Handoff()
        poller = asyncio.create_task(poll_snapshots(source, "mira", handoff, interval=0))
        await _yield()
        assert source.calls == 1

        first = await handoff.receive()
        await _yield()
        assert first.updated == 1
        assert source.calls == 2

        await _yield()
        assert source.calls == 2

        poller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await poller

    asyncio.run(scenario())


def test_poller_propagates_fetch_errors_without_sending():
    async def scenario() -> Handoff[Snapshot]:
        handoff: Handoff[Snapshot] = Handoff()
        with pytest.raises(FetchError):
            await poll_snapshots(CountingSource(fail_on=1), "mira", handoff, interval=0)
        return handoff

    assert not asyncio.run(scenario()).pending()


def test_monitor_renders_until_fetch_fails():
    rendered: list[int] = []
    source = CountingSource(fail_on=4)
    monitor = Monitor(source, "mira", lambda snapshot: rendered.append(snapshot.updated), interval=0)

    with pytest.raises(FetchError, match="connection refused"):
        asyncio.run(monitor.run())

    assert rendered == [1, 2, 3]
    assert source.calls == 4


def test_slow_renderer_throttles_fetching():
    source = CountingSource(fail_on=3)
    seen: list[int] = []

    def slow_render(snapshot: Snapshot) -> None:
        # every fetch so far has been consumed by the time we render
        assert source.calls == snapshot.updated
        seen.append(snapshot.updated)

    with pytest.raises(FetchError):
        asyncio.run(Monitor(source, "mira", slow_render, interval=0.01).run())
    assert seen == [1, 2]
