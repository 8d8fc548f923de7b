from __future__ import annotations

import logging

import requests

from .errors import NotFoundError

DEFAULT_BASE_URL = "https://www.royalroad.com"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


class RoyalClient:
    """Blocking HTTP transport: one GET per call, no retries, no caching."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def get(self, path: str) -> str:
        url = self.url_for(path)
        logger.debug("GET %s", url)
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NotFoundError(f"Failed to fetch {url}: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise NotFoundError(f"GET {url} failed with status {resp.status_code}")
        return resp.text

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "RoyalClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
