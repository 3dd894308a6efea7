from typing import Optional


class ApiError(Exception):
    """Any failure talking to the readings API."""


class NetworkError(ApiError):
    """The request never produced an HTTP response."""


class HttpStatusError(ApiError):
    def __init__(self, status_code: int, url: str = ""):
        super().__init__(f"HTTP {status_code} for {url}" if url else f"HTTP {status_code}")
        self.status_code = status_code
        self.url = url


class NotFoundError(HttpStatusError):
    def __init__(self, url: str = ""):
        super().__init__(404, url)


class MissingTokenError(ApiError):
    """Raised when an API session is built without a bearer token."""


class ConfigError(ValueError):
    def __init__(self, key: str, value: Optional[object], reason: str):
        super().__init__(f"invalid setting {key}={value!r}: {reason}")
        self.key = key
