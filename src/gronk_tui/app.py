"""Terminal dashboard for jobs running on an ALCF machine."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import Iterable, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text
from textual.app import App, ComposeResult
from textual.pilot import Pilot
from textual.widgets import DataTable, Footer, Header, Static

from .data import JobRecord, Snapshot
from .fetcher import DEFAULT_HOST, FetchError, GronkDataFetcher
from .monitor import DEFAULT_REFRESH_INTERVAL, Monitor
from .ui_config import JOB_TABLE_COLUMNS, TABLE_WIDTH
from .utils import env_flag

_LOGGER = logging.getLogger(__name__)

RULE = "-" * TABLE_WIDTH
CLEAR_SCREEN = "\x1b[2J\x1b[H"


def _format_updated(updated: int) -> str:
    """Return *updated* (Unix seconds) as a local wall-clock string.

    Timestamps the platform cannot represent fall back to the raw seconds.
    """

    try:
        moment = datetime.fromtimestamp(updated).astimezone()
    except (OverflowError, ValueError, OSError):
        return f"{updated} (Unix seconds)"
    return moment.strftime("%Y-%m-%d %H:%M:%S %z %Z")


def _format_row(values: Iterable[object]) -> str:
    cells = [
        f"| {str(value):<{width}}"
        for value, (_, width) in zip(values, JOB_TABLE_COLUMNS)
    ]
    return "".join(cells) + "|"


def job_table_cells(job: JobRecord) -> tuple[str, ...]:
    """Return the display values of *job* in column order."""

    return (
        str(job.jobid),
        job.project,
        job.runtimef,
        job.walltimef,
        job.locationf,
        job.queue,
        str(job.nodes),
        job.mode,
    )


def header_lines(machine: str) -> list[str]:
    title = f"{machine} job data"
    return [
        RULE,
        f"|    {title:<{TABLE_WIDTH - 7}} |",
        RULE,
        _format_row(label for label, _ in JOB_TABLE_COLUMNS),
        RULE,
    ]


def footer_lines(updated: int) -> list[str]:
    stamp = _format_updated(updated)
    return [
        RULE,
        f"| Last updated: {stamp:<{TABLE_WIDTH - 18}} |",
        RULE,
    ]


def snapshot_to_lines(machine: str, snapshot: Snapshot) -> list[str]:
    """Return the text table for *snapshot*, sorting its running jobs first."""

    snapshot.sort_running()
    lines = header_lines(machine)
    lines.extend(_format_row(job_table_cells(job)) for job in snapshot.running)
    lines.extend(footer_lines(snapshot.updated))
    return lines


class Renderer:
    """Clear the terminal and print the running jobs of each snapshot."""

    def __init__(self, machine: str, console: Optional[Console] = None) -> None:
        self.machine = machine
        self.console = console or Console(highlight=False)

    def render(self, snapshot: Snapshot, *, clear: bool = True) -> None:
        if clear:
            self.console.out(CLEAR_SCREEN, end="", highlight=False)
        for line in snapshot_to_lines(self.machine, snapshot):
            self.console.out(line, highlight=False)


class StatusBar(Static):
    """Display status messages."""

    def update_status(self, message: str, *, severity: str = "info") -> None:
        if severity == "error":
            text = Text(message, style="red")
        else:
            text = Text(message)
        self.status_text = message
        self.update(text)


class JobsTable(DataTable):
    """Data table displaying running jobs."""

    def on_mount(self) -> None:
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.show_header = True
        self.add_columns(*(label for label, _ in JOB_TABLE_COLUMNS))

    def update_jobs(self, jobs: Iterable[JobRecord]) -> None:
        self.clear()
        for job in jobs:
            self.add_row(*job_table_cells(job))


class GronkTUI(App[None]):
    """Interactive variant of the dashboard built on Textual."""

    CSS = """
    JobsTable {
        height: 1fr;
    }
    StatusBar {
        height: 1;
        padding: 0 1;
    }
    """
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh now"),
    ]

    def __init__(
        self,
        machine: str,
        *,
        fetcher: Optional[GronkDataFetcher] = None,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
    ) -> None:
        super().__init__()
        self.machine = machine
        self.fetcher = fetcher or GronkDataFetcher()
        self.refresh_interval = refresh_interval
        self.title = f"{machine} job data"
        self._refreshing: bool = False
        self.error_message: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield JobsTable(id="jobs_table")
        yield StatusBar(id="status")
        yield Footer()

    async def on_mount(self) -> None:
        self.set_interval(self.refresh_interval, self.refresh_data)
        await self.refresh_data()

    async def refresh_data(self) -> None:
        if self._refreshing:
            return
        self._refreshing = True
        try:
            snapshot = await self.fetcher.fetch_snapshot(self.machine)
        except FetchError as exc:
            self.error_message = f"Oops!: {exc}"
            self.query_one(StatusBar).update_status(self.error_message, severity="error")
            self.exit(return_code=1)
        else:
            snapshot.sort_running()
            self.query_one(JobsTable).update_jobs(snapshot.running)
            self.query_one(StatusBar).update_status(
                f"Last updated: {_format_updated(snapshot.updated)}"
            )
        finally:
            self._refreshing = False

    async def action_refresh(self) -> None:
        await self.refresh_data()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gronk-tui", description="Show jobs running on an ALCF machine"
    )
    parser.add_argument("machine", nargs="?", help="Machine name, e.g. mira")
    parser.add_argument(
        "--refresh-interval",
        type=float,
        default=DEFAULT_REFRESH_INTERVAL,
        metavar="SECONDS",
        help="Seconds to wait between polls (default: 5).",
    )
    parser.add_argument(
        "--host",
        default=os.getenv("GRONK_TUI_HOST") or DEFAULT_HOST,
        help="Status server host name (default: $GRONK_TUI_HOST or %(default)s).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="HTTP timeout; requests wait indefinitely when omitted.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--inline",
        action="store_true",
        help="Fetch once, print the table and exit.",
    )
    mode.add_argument(
        "--tui",
        action="store_true",
        help="Start the interactive Textual dashboard.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def run(
    argv: Optional[Sequence[str]] = None,
    *,
    fetcher: Optional[GronkDataFetcher] = None,
    console: Optional[Console] = None,
) -> int:
    """Entry point used by the ``gronk-tui`` console script."""

    parser = build_parser()
    args = parser.parse_args(argv)

    machine = (args.machine or "").strip()
    if not machine:
        parser.print_usage(sys.stderr)
        print("error: a machine name is required", file=sys.stderr)
        return 1

    _configure_logging(args.verbose)

    fetcher_instance = fetcher or GronkDataFetcher(host=args.host, timeout=args.timeout)

    if args.tui:
        app = GronkTUI(
            machine,
            fetcher=fetcher_instance,
            refresh_interval=args.refresh_interval,
        )
        auto_pilot = None
        if os.getenv("GRONK_TUI_AUTOPILOT", "").strip().lower() in {"quit", "exit"}:

            async def _auto_quit(pilot: Pilot) -> None:
                await pilot.pause(0.1)
                await pilot.press("q")

            auto_pilot = _auto_quit
        app.run(headless=env_flag("GRONK_TUI_HEADLESS"), auto_pilot=auto_pilot)
        if app.error_message:
            print(app.error_message, file=sys.stderr)
        return app.return_code or 0

    renderer = Renderer(machine, console)
    try:
        if args.inline:
            snapshot = asyncio.run(fetcher_instance.fetch_snapshot(machine))
            renderer.render(snapshot, clear=False)
            return 0
        monitor = Monitor(
            fetcher_instance,
            machine,
            renderer.render,
            interval=args.refresh_interval,
        )
        asyncio.run(monitor.run())
    except FetchError as exc:
        print(f"Oops!: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        _LOGGER.debug("Interrupted, shutting down")
        return 0
    return 0


def main() -> None:
    raise SystemExit(run())


__all__ = ["GronkTUI", "Renderer", "main", "run", "snapshot_to_lines"]
