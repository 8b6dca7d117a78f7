"""Built-in activity document for demonstrating the dashboard offline."""

from __future__ import annotations

import time
from typing import Any, Dict, Optional


def sample_document(now: Optional[float] = None) -> Dict[str, Any]:
    """Return a representative ``activity.json`` payload."""

    now = time.time() if now is None else now
    return {
        "updated": int(now),
        "dimensions": {
            "midplanes": 2,
            "nodecards": 16,
            "racks": 16,
            "rows": 3,
            "subdivisions": 4,
        },
        "running": [
            {
                "color": "#3366cc",
                "jobid": 1204311,
                "location": "MIR-00000-33331-16384",
                "locationf": "R00-R0F",
                "mode": "c16",
                "nodes": 16384,
                "project": "ClimateSim",
                "queue": "prod-capability",
                "runtime": 7545,
                "runtimef": "02:05:45",
                "starttime": "10/19/26 08:12:03",
                "state": "running",
                "submittime": now - 40211.0,
                "walltime": 43200,
                "walltimef": "12:00:00",
            },
            {
                "color": "#dc3912",
                "jobid": 1204377,
                "location": "MIR-04400-37771-1024",
                "locationf": "R11-M0",
                "mode": "script",
                "nodes": 1024,
                "project": "LatticeQCD",
                "queue": "prod-short",
                "runtime": 1310,
                "runtimef": "00:21:50",
                "starttime": "10/19/26 09:56:18",
                "state": "running",
                "submittime": now - 9120.0,
                "walltime": 10800,
                "walltimef": "03:00:00",
            },
            {
                "color": "#ff9900",
                "jobid": 1204390,
                "location": "MIR-08000-3BFF1-2048",
                "locationf": "R20-R21",
                "mode": "c32",
                "nodes": 2048,
                "project": "Turbulence",
                "queue": "prod-long",
                "runtime": 402,
                "runtimef": "00:06:42",
                "starttime": "10/19/26 10:11:26",
                "state": "running",
                "submittime": now - 3600.0,
                "walltime": 86400,
                "walltimef": "24:00:00",
            },
        ],
        "queued": [
            {
                "color": "",
                "jobid": 1204402,
                "location": "",
                "locationf": "",
                "mode": "script",
                "nodes": 512,
                "project": "MatSci",
                "queue": "default",
                "runtime": 0,
                "runtimef": "",
                "starttime": "",
                "state": "queued",
                "submittime": now - 610.0,
                "walltime": 3600,
                "walltimef": "01:00:00",
            },
        ],
        "reservation": [
            {
                "duration": 21600,
                "durationf": "06:00:00",
                "name": "maintenance",
                "partitions": "MIR-00000-7BFF1-49152",
                "queue": "R.maintenance",
                "start": now + 86400.0,
                "startf": "10/20/26 08:00:00",
                "tminus": "23:47:31",
            },
        ],
    }


__all__ = ["sample_document"]
