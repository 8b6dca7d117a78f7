"""Data structures for the ALCF gronk activity feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True, frozen=True)
class JobRecord:
    """A single running or queued job as published by the feed."""

    jobid: int = 0
    project: str = ""
    queue: str = ""
    nodes: int = 0
    mode: str = ""
    location: str = ""
    locationf: str = ""
    runtime: int = 0
    runtimef: str = ""
    walltime: int = 0
    walltimef: str = ""
    starttime: str = ""
    submittime: float = 0.0
    state: str = ""
    color: str = ""


@dataclass(slots=True, frozen=True)
class ReservationRecord:
    """A scheduled reservation on the machine."""

    name: str = ""
    partitions: str = ""
    queue: str = ""
    start: float = 0.0
    startf: str = ""
    duration: int = 0
    durationf: str = ""
    tminus: str = ""


@dataclass(slots=True, frozen=True)
class ClusterDimensions:
    """Static shape of the machine."""

    racks: int = 0
    rows: int = 0
    midplanes: int = 0
    nodecards: int = 0
    subdivisions: int = 0


@dataclass(slots=True)
class Snapshot:
    """One decoded poll of the activity feed."""

    updated: int = 0
    dimensions: ClusterDimensions = field(default_factory=ClusterDimensions)
    running: List[JobRecord] = field(default_factory=list)
    queued: List[JobRecord] = field(default_factory=list)
    reservations: List[ReservationRecord] = field(default_factory=list)

    def sort_running(self) -> None:
        """Order running jobs by walltime, longest first."""

        self.running.sort(key=lambda job: job.walltime, reverse=True)
