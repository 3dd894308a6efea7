"""Factories and an in-memory API client for the test suite."""

import factory

from envmon.errors import NotFoundError
from envmon.models import Device, Reading

# fixed wall clock used across controller tests: 10 s after BASE_TS
BASE_TS = 1_700_000_000
NOW_MS = (BASE_TS + 10) * 1000


class DeviceFactory(factory.Factory):
    class Meta:
        model = Device

    device_id = factory.Sequence(lambda n: f"dev-{n}")
    device_name = factory.LazyAttribute(lambda o: f"Sensor {o.device_id}")
    device_imei = "860000000000001"
    is_active = True
    user_id = "u1"


class ReadingFactory(factory.Factory):
    class Meta:
        model = Reading

    id = factory.Sequence(lambda n: f"r-{n}")
    device_id = "d1"
    temperature = 22.0
    humidity = 45.0
    pressure = 1013.2
    co = 0.5
    co2 = 420.0
    methane = 1.2
    lpg = 0.3
    pm25 = 12.0
    pm10 = 20.0
    noise = 40.0
    light = 300.0
    recorded_at = str(BASE_TS)


class FakeApiClient:
    """Stand-in for ``ApiClient``.

    ``readings`` maps a device id to a Reading or an exception to raise;
    unknown devices answer 404. ``hooks`` run inside a call, before it
    returns, to observe or disturb in-flight state.
    """

    def __init__(self, devices=(), readings=None, ranges=None, device_error=None):
        self.devices = list(devices)
        self.readings = dict(readings or {})
        self.ranges = [] if ranges is None else ranges
        self.device_error = device_error
        self.hooks = {}
        self.calls = []

    def _run_hook(self, key):
        hook = self.hooks.pop(key, None)
        if hook is not None:
            hook()

    def list_devices(self):
        self.calls.append(("devices",))
        if self.device_error is not None:
            raise self.device_error
        return list(self.devices)

    def latest_reading(self, device_id):
        self.calls.append(("latest", device_id))
        self._run_hook(("latest", device_id))
        result = self.readings.get(device_id, NotFoundError())
        if isinstance(result, Exception):
            raise result
        return result

    def range_readings(self, device_id, start, end):
        self.calls.append(("range", device_id, start, end))
        self._run_hook(("range", device_id))
        if isinstance(self.ranges, Exception):
            raise self.ranges
        return list(self.ranges)
