import logging
import math
from datetime import datetime
from typing import List
from urllib.parse import quote

import requests
from pydantic import ValidationError

from envmon.errors import ApiError, HttpStatusError, NetworkError, NotFoundError
from envmon.models import Device, Reading
from envmon.session import ApiSession

log = logging.getLogger(__name__)


def epoch_seconds(instant: datetime) -> int:
    return math.floor(instant.timestamp())


class ApiClient:
    """Thin wrapper over the readings API.

    Every method raises an ``ApiError`` subclass on failure; a 404 from any
    endpoint is a ``NotFoundError``.
    """

    def __init__(self, session: ApiSession):
        self.session = session

    def api_get(self, path: str, params=None):
        url = self.session.url(path)
        try:
            r = self.session.http.get(
                url,
                params=params or {},
                headers=self.session.headers,
                timeout=self.session.timeout,
            )
        except requests.RequestException as e:
            log.warning("GET %s failed: %s", url, e)
            raise NetworkError(str(e)) from e

        if r.status_code == 404:
            raise NotFoundError(url)
        if not r.ok:
            log.warning("GET %s returned HTTP %s", url, r.status_code)
            raise HttpStatusError(r.status_code, url)
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f"malformed JSON from {url}") from e

    def list_devices(self) -> List[Device]:
        data = self.api_get("/devices")
        try:
            return [Device.model_validate(d) for d in data]
        except (TypeError, ValidationError) as e:
            raise ApiError(f"unexpected device payload: {e}") from e

    def latest_reading(self, device_id: str) -> Reading:
        data = self.api_get(f"/data/latest/{quote(device_id, safe='')}")
        try:
            return Reading.model_validate(data)
        except ValidationError as e:
            raise ApiError(f"unexpected reading payload: {e}") from e

    def range_readings(self, device_id: str, start: datetime, end: datetime) -> List[Reading]:
        params = {
            "device_id": device_id,
            "from_ts": epoch_seconds(start),
            "to_ts": epoch_seconds(end),
        }
        data = self.api_get("/data/range", params)
        try:
            return [Reading.model_validate(d) for d in data]
        except (TypeError, ValidationError) as e:
            raise ApiError(f"unexpected range payload: {e}") from e
