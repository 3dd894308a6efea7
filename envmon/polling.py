import threading
from dataclasses import dataclass
from typing import Hashable

DASHBOARD_POLL_SECONDS = 5
ANALYTICS_POLL_SECONDS = 30


@dataclass(frozen=True)
class Ticket:
    generation: int
    key: Hashable


class RequestTracker:
    """Generation counter for fetches that can be superseded.

    Each ``begin`` invalidates every earlier ticket. A fetch applies its
    result only if its ticket is still current when the response arrives.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generation = 0
        self._key: Hashable = None

    def begin(self, key: Hashable) -> Ticket:
        with self._lock:
            self._generation += 1
            self._key = key
            return Ticket(self._generation, key)

    def is_current(self, ticket: Ticket) -> bool:
        with self._lock:
            return ticket.generation == self._generation and ticket.key == self._key


class TickCounter:
    """Turns the running count reported by ``st_autorefresh`` into ticks.

    Ordinary reruns (a button press, a widget change) repeat the previous
    count and are not ticks. A count lower than the last one seen means the
    timer was remounted, which resets the baseline.
    """

    def __init__(self):
        self._seen = None

    def consume(self, count: int) -> bool:
        if self._seen is None or count < self._seen:
            self._seen = count
            return False
        if count == self._seen:
            return False
        self._seen = count
        return True

    def reset(self):
        self._seen = None
