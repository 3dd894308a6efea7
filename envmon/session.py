from dataclasses import dataclass, field

import requests

from envmon.config import Settings
from envmon.errors import MissingTokenError


@dataclass
class ApiSession:
    """Everything a request needs: where the API lives and who is asking."""

    base_url: str
    token: str
    timeout: float = 5.0
    http: requests.Session = field(default_factory=requests.Session, repr=False)

    def __post_init__(self):
        if not self.token:
            raise MissingTokenError("an API token is required")
        self.base_url = self.base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings, token: str) -> "ApiSession":
        return cls(base_url=settings.api_base_url, token=token, timeout=settings.request_timeout)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def close(self):
        self.http.close()
