from __future__ import annotations

from typing import Optional

import requests

from gronk_tui.data import JobRecord, Snapshot


def make_job(**overrides) -> JobRecord:
    defaults = dict(
        jobid=1,
        project="demo",
        queue="default",
        nodes=1,
        mode="script",
        locationf="R00-M0",
        runtimef="00:10:00",
        walltime=3600,
        walltimef="01:00:00",
        state="running",
    )
    return JobRecord(**(defaults | overrides))


def make_snapshot(*job_overrides: dict, updated: int = 0) -> Snapshot:
    return Snapshot(updated=updated, running=[make_job(**overrides) for overrides in job_overrides])


class StubResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        # requests falls back to ISO-8859-1 for text/* without a charset
        self.text = content.decode("latin-1")
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class StubSession:
    """Stands in for :class:`requests.Session` and records requested URLs."""

    def __init__(
        self,
        text: str | bytes = "{}",
        *,
        status_code: int = 200,
        error: Optional[Exception] = None,
    ) -> None:
        self.text = text
        self.status_code = status_code
        self.error = error
        self.requests: list[tuple[str, Optional[float]]] = []

    def get(self, url: str, timeout: Optional[float] = None) -> StubResponse:
        self.requests.append((url, timeout))
        if self.error is not None:
            raise self.error
        content = self.text.encode("utf-8") if isinstance(self.text, str) else self.text
        return StubResponse(content, self.status_code)
