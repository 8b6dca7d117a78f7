"""Terminal monitor for jobs running on ALCF machines."""

from .app import GronkTUI, Renderer, run
from .data import ClusterDimensions, JobRecord, ReservationRecord, Snapshot
from .fetcher import DecodeError, FetchError, GronkDataFetcher

__all__ = [
    "ClusterDimensions",
    "DecodeError",
    "FetchError",
    "GronkDataFetcher",
    "GronkTUI",
    "JobRecord",
    "Renderer",
    "ReservationRecord",
    "Snapshot",
    "run",
]
