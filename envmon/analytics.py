"""Historical view: readings for one device between two instants."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from envmon.api import ApiClient
from envmon.errors import ApiError, NetworkError
from envmon.export import CsvExport, build_export
from envmon.models import Device, Reading
from envmon.polling import RequestTracker

log = logging.getLogger(__name__)

MSG_NETWORK = "Network error"
MSG_DEVICES_FAILED = "Failed to fetch devices"
MSG_RANGE_FAILED = "Failed to fetch range data"

DEFAULT_RANGE_HOURS = 24
# label -> hours offered by the quick range selector
QUICK_RANGES = {
    "Last 1 hour": 1,
    "Last 6 hours": 6,
    "Last 24 hours": 24,
    "Last 7 days": 168,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def quick_range(hours: float, now: Optional[datetime] = None):
    end = now or utcnow()
    return end - timedelta(hours=hours), end


@dataclass
class AnalyticsState:
    devices: List[Device] = field(default_factory=list)
    selected_device: str = ""
    readings: List[Reading] = field(default_factory=list)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    loading: bool = True
    data_loading: bool = False
    error: str = ""
    auto_refresh: bool = False
    # what the current readings were fetched for
    loaded_device: str = ""
    loaded_start: Optional[datetime] = None
    loaded_end: Optional[datetime] = None

    @property
    def can_fetch(self) -> bool:
        return bool(self.selected_device and self.start and self.end)


class AnalyticsController:
    def __init__(self, client: ApiClient, clock: Callable[[], datetime] = utcnow):
        self.client = client
        self.clock = clock
        self.state = AnalyticsState()
        self.tracker = RequestTracker()
        self.set_quick_range(DEFAULT_RANGE_HOURS)

    def load_devices(self):
        state = self.state
        try:
            devices = self.client.list_devices()
        except NetworkError:
            state.error = MSG_NETWORK
        except ApiError:
            state.error = MSG_DEVICES_FAILED
        else:
            state.devices = devices
            log.info("loaded %d devices", len(devices))
            if devices and all(d.device_id != state.selected_device for d in devices):
                state.selected_device = devices[0].device_id
        finally:
            state.loading = False

    def select_device(self, device_id: str):
        self.state.selected_device = device_id

    def set_range(self, start: Optional[datetime], end: Optional[datetime]):
        self.state.start = start
        self.state.end = end

    def set_quick_range(self, hours: float):
        self.set_range(*quick_range(hours, self.clock()))

    def fetch_range(self, show_loading: bool = True):
        state = self.state
        if not state.can_fetch:
            return
        device_id, start, end = state.selected_device, state.start, state.end
        ticket = self.tracker.begin((device_id, start, end))
        if show_loading:
            state.data_loading = True
        state.error = ""

        try:
            readings = self.client.range_readings(device_id, start, end)
        except NetworkError:
            if self.tracker.is_current(ticket):
                state.error = MSG_NETWORK
        except ApiError:
            if self.tracker.is_current(ticket):
                state.error = MSG_RANGE_FAILED
        else:
            if self.tracker.is_current(ticket):
                state.readings = readings
                state.loaded_device = device_id
                state.loaded_start = start
                state.loaded_end = end
                log.info("loaded %d readings for %s", len(readings), device_id)
            else:
                log.debug("discarding stale range for %s", device_id)
        finally:
            if show_loading:
                state.data_loading = False

    def poll(self):
        self.fetch_range(show_loading=False)

    def toggle_auto_refresh(self) -> bool:
        self.state.auto_refresh = not self.state.auto_refresh
        return self.state.auto_refresh

    def export_csv(self) -> Optional[CsvExport]:
        state = self.state
        return build_export(
            state.readings,
            state.loaded_device or state.selected_device,
            state.loaded_start or state.start,
            state.loaded_end or state.end,
        )
