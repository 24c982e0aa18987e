"""HTTP fetch client and request throttling for the Quran.com API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

import requests
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_random_exponential

LOGGER = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Base class for failures while fetching API data."""


class NetworkError(FetchError):
    """Raised when the transport fails (DNS, refused, reset, timeout)."""


class ParseError(FetchError):
    """Raised when a response body is not valid JSON."""


@dataclass
class Throttle:
    """Fixed pauses between API calls and between chapters.

    A delay of 0 disables the corresponding pause.
    """

    request_delay: float = 0.1
    chapter_delay: float = 0.5
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def after_request(self) -> None:
        if self.request_delay > 0:
            self.sleep(self.request_delay)

    def between_chapters(self) -> None:
        if self.chapter_delay > 0:
            self.sleep(self.chapter_delay)


class FetchClient:
    """Minimal JSON client for a Quran.com compatible REST API.

    Each attempt issues exactly one GET. Redirects follow the ``requests``
    default and ``timeout=None`` leaves the transport default (no timeout).
    Only ``NetworkError`` is retried, and only when ``max_attempts`` > 1.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        max_attempts: int = 1,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": "QuranJsonDownloader/1.0 (+https://quran.com)",
            "Accept": "application/json",
        })

    def api_url(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        url = f"{self.base_url}{path}"
        if params:
            query = urlencode(
                [(key, value) for key, value in params.items() if value is not None and value != ""],
                safe=",",
            )
            if query:
                url += ("&" if "?" in url else "?") + query
        return url

    def fetch_json(self, url: str) -> Any:
        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_random_exponential(multiplier=0.5, max=10),
            retry=retry_if_exception_type(NetworkError),
            before_sleep=before_sleep_log(LOGGER, logging.WARNING),
        )
        return retrying(self._fetch_once, url)

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self.fetch_json(self.api_url(path, params))

    def _fetch_once(self, url: str) -> Any:
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"HTTP request failed for {url}: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"Failed to parse JSON from {url}: {exc}") from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "FetchClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
