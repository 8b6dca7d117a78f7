from __future__ import annotations

import asyncio

from gronk_tui.app import GronkTUI, JobsTable, StatusBar, run
from gronk_tui.data import Snapshot
from gronk_tui.fetcher import FetchError

from util import make_snapshot


class StaticFetcher:
    def __init__(self, snapshot: Snapshot | None = None, error: Exception | None = None) -> None:
        self.snapshot = snapshot
        self.error = error
        self.calls = 0

    async def fetch_snapshot(self, machine: str) -> Snapshot:
        self.calls += 1
        if self.error is not None:
            raise self.error
        assert self.snapshot is not None
        return self.snapshot


def test_tui_lists_running_jobs_by_walltime():
    snapshot = make_snapshot(
        dict(jobid=1, walltime=60),
        dict(jobid=2, walltime=7200),
        dict(jobid=3, walltime=600),
    )
    app = GronkTUI("mira", fetcher=StaticFetcher(snapshot), refresh_interval=60)

    async def scenario() -> list[str]:
        async with app.run_test() as pilot:
            await pilot.pause()
            table = app.query_one(JobsTable)
            assert table.row_count == 3
            return [table.get_row_at(index)[0] for index in range(table.row_count)]

    assert asyncio.run(scenario()) == ["2", "3", "1"]


def test_tui_refresh_binding_fetches_again():
    fetcher = StaticFetcher(make_snapshot(dict(jobid=5)))
    app = GronkTUI("mira", fetcher=fetcher, refresh_interval=60)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("r")
            await pilot.pause()

    asyncio.run(scenario())
    assert fetcher.calls >= 2


def test_tui_exits_with_error_on_fetch_failure():
    fetcher = StaticFetcher(error=FetchError("connection refused"))
    app = GronkTUI("mira", fetcher=fetcher, refresh_interval=60)

    asyncio.run(app.run_async(headless=True))
    assert app.return_code == 1
    assert app.error_message == "Oops!: connection refused"


def test_status_bar_shows_last_update():
    app = GronkTUI("mira", fetcher=StaticFetcher(make_snapshot(updated=0)), refresh_interval=60)

    async def scenario() -> str:
        async with app.run_test() as pilot:
            await pilot.pause()
            return app.query_one(StatusBar).status_text

    assert asyncio.run(scenario()).startswith("Last updated: ")


def test_autopilot_quits_headless_dashboard(monkeypatch):
    monkeypatch.setenv("GRONK_TUI_AUTOPILOT", "quit")
    monkeypatch.setenv("GRONK_TUI_HEADLESS", "1")
    monkeypatch.setenv("GRONK_TUI_SAMPLE_DATA", "1")
    assert run(["mira", "--tui"]) == 0
