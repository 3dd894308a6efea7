"""Live single-device view: device registry, online status and latest reading."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from envmon.api import ApiClient
from envmon.errors import ApiError, NetworkError, NotFoundError
from envmon.models import Device, Reading
from envmon.polling import RequestTracker
from envmon.status import is_online, now_ms

log = logging.getLogger(__name__)

MSG_NETWORK = "Network error"
MSG_DEVICES_FAILED = "Failed to fetch devices"
MSG_DATA_FAILED = "Failed to fetch device data"
MSG_NO_DATA = "No data available for this device"


@dataclass
class DashboardState:
    devices: List[Device] = field(default_factory=list)
    selected_device: str = ""
    reading: Optional[Reading] = None
    statuses: Dict[str, bool] = field(default_factory=dict)
    loading: bool = True
    data_loading: bool = False
    error: str = ""
    auto_refresh: bool = False

    def is_online(self, device_id: str) -> bool:
        return self.statuses.get(device_id, False)

    def find(self, device_id: str) -> Optional[Device]:
        return next((d for d in self.devices if d.device_id == device_id), None)


class DashboardController:
    def __init__(self, client: ApiClient, clock: Callable[[], int] = now_ms):
        self.client = client
        self.clock = clock
        self.state = DashboardState()
        self.tracker = RequestTracker()

    def _check_status(self, device: Device) -> bool:
        try:
            reading = self.client.latest_reading(device.device_id)
        except ApiError as e:
            log.debug("status check for %s failed: %s", device.device_id, e)
            return False
        return is_online(reading, self.clock())

    def load_devices(self, requested_device: Optional[str] = None):
        """Fetch the device list, then check each device's latest reading in turn."""
        state = self.state
        try:
            devices = self.client.list_devices()
        except NetworkError:
            state.error = MSG_NETWORK
            state.loading = False
            return
        except ApiError:
            state.error = MSG_DEVICES_FAILED
            state.loading = False
            return

        state.devices = devices
        log.info("loaded %d devices", len(devices))

        statuses = {d.device_id: self._check_status(d) for d in devices}
        known = set(statuses)
        for device_id in [k for k in state.statuses if k not in known]:
            del state.statuses[device_id]
        state.statuses.update(statuses)
        state.loading = False

        if not state.selected_device and not requested_device and devices:
            state.selected_device = devices[0].device_id
            self.fetch_reading(state.selected_device)

    def fetch_reading(self, device_id: str, show_loading: bool = True):
        if not device_id:
            return
        state = self.state
        ticket = self.tracker.begin(device_id)
        if show_loading:
            state.data_loading = True
        state.error = ""

        try:
            reading = self.client.latest_reading(device_id)
        except NotFoundError:
            if self.tracker.is_current(ticket):
                state.reading = None
                state.error = MSG_NO_DATA
                state.statuses[device_id] = False
        except NetworkError:
            if self.tracker.is_current(ticket):
                state.reading = None
                state.error = MSG_NETWORK
        except ApiError:
            if self.tracker.is_current(ticket):
                state.reading = None
                state.error = MSG_DATA_FAILED
        else:
            if self.tracker.is_current(ticket):
                state.reading = reading
                state.statuses[device_id] = is_online(reading, self.clock())
            else:
                log.debug("discarding stale reading for %s", device_id)
        finally:
            if show_loading:
                state.data_loading = False

    def select_device(self, device_id: str):
        state = self.state
        state.selected_device = device_id
        state.error = ""
        state.reading = None
        self.fetch_reading(device_id)

    def follow_location(self, device_param: Optional[str]):
        """Apply a ``device`` URL parameter once the device list is known."""
        if not device_param or device_param == self.state.selected_device:
            return
        if self.state.find(device_param) is not None:
            self.select_device(device_param)

    def refresh(self):
        if self.state.selected_device:
            self.fetch_reading(self.state.selected_device)
        self.load_devices()

    def poll(self):
        if not self.state.selected_device:
            return
        self.fetch_reading(self.state.selected_device, show_loading=False)
        self.load_devices()

    def toggle_auto_refresh(self) -> bool:
        self.state.auto_refresh = not self.state.auto_refresh
        return self.state.auto_refresh
