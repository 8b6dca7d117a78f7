"""Polling loop feeding snapshots to a renderer one at a time."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, Optional, Protocol, TypeVar

from .data import Snapshot

_LOGGER = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 5.0

T = TypeVar("T")


class SnapshotSource(Protocol):
    async def fetch_snapshot(self, machine: str) -> Snapshot: ...


class Handoff(Generic[T]):
    """Unbuffered rendezvous between one sender and one receiver.

    :meth:`send` returns only once :meth:`receive` has taken the value, so at
    most one item is ever in flight.
    """

    def __init__(self) -> None:
        self._slot: asyncio.Queue[T] = asyncio.Queue(maxsize=1)

    async def send(self, item: T) -> None:
        await self._slot.put(item)
        await self._slot.join()

    async def receive(self) -> T:
        item = await self._slot.get()
        self._slot.task_done()
        return item

    def pending(self) -> bool:
        """Return ``True`` while a sent item has not been received."""

        return not self._slot.empty()


async def poll_snapshots(
    source: SnapshotSource,
    machine: str,
    handoff: Handoff[Snapshot],
    *,
    interval: float = DEFAULT_REFRESH_INTERVAL,
) -> None:
    """Fetch snapshots forever, sleeping *interval* seconds after each handoff.

    Fetch errors propagate out of the coroutine; nothing is sent for a failed
    fetch.
    """

    while True:
        snapshot = await source.fetch_snapshot(machine)
        await handoff.send(snapshot)
        await asyncio.sleep(interval)


class Monitor:
    """Own the poller task and drive *render* with every received snapshot."""

    def __init__(
        self,
        source: SnapshotSource,
        machine: str,
        render: Callable[[Snapshot], None],
        *,
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ) -> None:
        self.source = source
        self.machine = machine
        self.render = render
        self.interval = interval
        self.handoff: Handoff[Snapshot] = Handoff()
        self._poller: Optional[asyncio.Task[None]] = None

    async def run(self) -> None:
        """Render snapshots until the poller fails.

        The poller's exception is re-raised here after the pending receive is
        cancelled.
        """

        self._poller = asyncio.create_task(
            poll_snapshots(self.source, self.machine, self.handoff, interval=self.interval),
            name=f"poll-{self.machine}",
        )
        try:
            while True:
                receive = asyncio.ensure_future(self.handoff.receive())
                done, _ = await asyncio.wait(
                    {receive, self._poller}, return_when=asyncio.FIRST_COMPLETED
                )
                if receive in done:
                    self.render(receive.result())
                    continue
                receive.cancel()
                _LOGGER.debug("Poller for %s stopped", self.machine)
                self._poller.result()
                return
        finally:
            if not self._poller.done():
                self._poller.cancel()
                try:
                    await self._poller
                except asyncio.CancelledError:
                    pass


__all__ = ["DEFAULT_REFRESH_INTERVAL", "Handoff", "Monitor", "poll_snapshots"]
