"""Utilities for gathering job activity from the gronk status service."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from dataclasses import fields
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

import requests

from .data import ClusterDimensions, JobRecord, ReservationRecord, Snapshot
from .samples import sample_document
from .utils import env_flag

_LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "status.alcf.anl.gov"

R = TypeVar("R")

_ZERO_VALUES: Dict[str, object] = {"int": 0, "float": 0.0, "str": ""}


class FetchError(Exception):
    """The activity feed could not be retrieved."""


class DecodeError(FetchError):
    """The activity feed was retrieved but could not be decoded."""


def _lower_keys(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(key).lower(): value for key, value in mapping.items()}


def _type_name(annotation: object) -> str:
    if isinstance(annotation, str):
        return annotation
    return getattr(annotation, "__name__", str(annotation))


def _coerce(value: Any, kind: str, where: str) -> object:
    if value is None:
        return _ZERO_VALUES[kind]
    # bool is an int subclass but never a valid number in the feed
    if isinstance(value, bool):
        raise DecodeError(f"{where}: expected {kind}, got bool")
    if kind == "int" and isinstance(value, int):
        return value
    if kind == "float" and isinstance(value, (int, float)):
        return float(value)
    if kind == "str" and isinstance(value, str):
        return value
    raise DecodeError(f"{where}: expected {kind}, got {type(value).__name__}")


def _record_from_mapping(cls: Type[R], mapping: object, where: str) -> R:
    """Build *cls* from *mapping*, matching field names case-insensitively."""

    if mapping is None:
        return cls()
    if not isinstance(mapping, dict):
        raise DecodeError(f"{where}: expected object, got {type(mapping).__name__}")
    lowered = _lower_keys(mapping)
    values = {
        spec.name: _coerce(lowered.get(spec.name), _type_name(spec.type), f"{where}.{spec.name}")
        for spec in fields(cls)
    }
    return cls(**values)


def _records_from_list(cls: Type[R], items: object, where: str) -> List[R]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise DecodeError(f"{where}: expected array, got {type(items).__name__}")
    return [
        _record_from_mapping(cls, item, f"{where}[{index}]")
        for index, item in enumerate(items)
    ]


def parse_snapshot(payload: object) -> Snapshot:
    """Decode an ``activity.json`` payload into a :class:`Snapshot`.

    Unknown keys are ignored and missing keys take zero values. Values of the
    wrong JSON type raise :class:`DecodeError`.
    """

    if not isinstance(payload, dict):
        raise DecodeError(f"activity: expected object, got {type(payload).__name__}")
    document = _lower_keys(payload)
    return Snapshot(
        updated=_coerce(document.get("updated"), "int", "updated"),
        dimensions=_record_from_mapping(
            ClusterDimensions, document.get("dimensions"), "dimensions"
        ),
        running=_records_from_list(JobRecord, document.get("running"), "running"),
        queued=_records_from_list(JobRecord, document.get("queued"), "queued"),
        reservations=_records_from_list(
            ReservationRecord, document.get("reservation"), "reservation"
        ),
    )


def parse_snapshot_text(text: Union[str, bytes]) -> Snapshot:
    """Decode a raw ``activity.json`` body; bytes are decoded as UTF-8/16/32."""

    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc
    return parse_snapshot(payload)


def _settle(future: asyncio.Future, result: Optional[Snapshot], error: Optional[Exception]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


class GronkDataFetcher:
    """Fetch machine activity from the gronk HTTP endpoint."""

    def __init__(
        self,
        *,
        host: str = DEFAULT_HOST,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        force_sample: Optional[bool] = None,
    ) -> None:
        if force_sample is None:
            force_sample = env_flag("GRONK_TUI_SAMPLE_DATA")
        self.force_sample = bool(force_sample)
        self.host = host
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, machine: str) -> str:
        return f"http://{self.host}/{machine}/activity.json"

    async def fetch_snapshot(self, machine: str) -> Snapshot:
        """Retrieve and decode the activity feed for *machine*.

        The blocking HTTP request runs on a daemon thread that settles a future
        on the running loop; cancelling the caller abandons the request. Raises
        :class:`FetchError` on transport failure and :class:`DecodeError` when
        the body is not a valid activity document.
        """

        if self.force_sample:
            _LOGGER.debug("Using bundled sample data for %s", machine)
            return parse_snapshot(sample_document())

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Snapshot] = loop.create_future()

        def worker() -> None:
            result: Optional[Snapshot] = None
            error: Optional[Exception] = None
            try:
                result = self.fetch_snapshot_sync(machine)
            except Exception as exc:
                error = exc
            try:
                loop.call_soon_threadsafe(_settle, future, result, error)
            except RuntimeError:
                # loop already closed; the caller is gone
                _LOGGER.debug("Dropping late response for %s", machine)

        threading.Thread(target=worker, name=f"fetch-{machine}", daemon=True).start()
        return await future

    def fetch_snapshot_sync(self, machine: str) -> Snapshot:
        url = self.url_for(machine)
        _LOGGER.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            _LOGGER.warning("Request to %s failed: %s", url, exc)
            raise FetchError(str(exc)) from exc
        try:
            snapshot = parse_snapshot_text(response.content)
        except DecodeError as exc:
            _LOGGER.warning("Failed to decode %s: %s", url, exc)
            raise
        _LOGGER.debug(
            "Decoded %d running and %d queued jobs from %s",
            len(snapshot.running),
            len(snapshot.queued),
            url,
        )
        return snapshot


__all__ = [
    "DEFAULT_HOST",
    "DecodeError",
    "FetchError",
    "GronkDataFetcher",
    "parse_snapshot",
    "parse_snapshot_text",
]
