"""Small helpers shared by the fetcher and the command line."""

from __future__ import annotations

import os


def env_flag(name: str) -> bool:
    """Return ``True`` when *name* is set to a truthy value."""

    value = os.getenv(name)
    if value is None:
        return False
    return value.strip().lower() not in {"", "0", "false", "no"}


__all__ = ["env_flag"]
