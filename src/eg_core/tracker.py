"""Chained tracking codes for ballots from one encryption device."""

from __future__ import annotations

from datetime import datetime, timezone

from .group import ElementModQ
from .hash import hash_elems


def get_hash_for_device(
    device_id: int, session_id: int, launch_code: int, location: str
) -> ElementModQ:
    """Starting hash of a device: the code seed of its first ballot."""
    return hash_elems(device_id, session_id, launch_code, location)


def get_rotating_tracker_hash(
    prev_hash: ElementModQ, timestamp: int, ballot_hash: ElementModQ
) -> ElementModQ:
    """Tracking code H(previous code, timestamp, ballot crypto hash)."""
    return hash_elems(prev_hash, timestamp, ballot_hash)


def utc_timestamp() -> int:
    return int(datetime.now(timezone.utc).timestamp())
