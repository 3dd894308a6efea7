import time
from typing import Optional

from envmon.models import Reading

# a device is online while its latest reading is at most this old
ONLINE_THRESHOLD_MS = 20_000


def now_ms() -> int:
    return int(time.time() * 1000)


def is_online(reading: Optional[Reading], now: Optional[int] = None) -> bool:
    """Freshness of a device given its most recent reading.

    ``now`` is wall-clock time in milliseconds. Readings stamped in the
    future give a negative age and count as online.
    """
    if reading is None:
        return False
    if now is None:
        now = now_ms()
    return now - reading.recorded_at_seconds * 1000 <= ONLINE_THRESHOLD_MS
