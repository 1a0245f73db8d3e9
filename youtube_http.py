"""
HTTP session wrapper used by every network call of the pipeline.

One instance owns one requests.Session (and so one cookie jar) plus the fixed
pre-request delay. Status codes are mapped onto the error taxonomy here: 429
becomes IpBlocked, any other non-2xx becomes HttpError. No retries.
"""

import time
from typing import Any, Callable, Dict, Optional

import requests

from log_events import evt
from logging_setup import get_logger, mask_url
from transcript_errors import HttpError, IpBlocked

logger = get_logger(__name__)

DEFAULT_DELAY_MS = 500
DEFAULT_TIMEOUT = 15
DEFAULT_ACCEPT_LANGUAGE = "en-US"
TOO_MANY_REQUESTS = 429


def check_http_errors(response: requests.Response, video_id: str) -> None:
    """Raise IpBlocked for 429 and HttpError for any other non-2xx status."""
    status = response.status_code
    if status == TOO_MANY_REQUESTS:
        evt("http_rate_limited", video_id=video_id, status_code=status)
        raise IpBlocked(video_id)
    if not 200 <= status < 300:
        reason = getattr(response, "reason", None) or "Unknown error"
        evt("http_error_status", video_id=video_id, status_code=status)
        raise HttpError(video_id, f"HTTP {status}: {reason}", status_code=status)


class YouTubeHttpSession:
    """
    Session scoped HTTP client with a persistent cookie jar.

    Every request is preceded by ``delay_ms`` of sleep to reduce rate
    limiting. The delay is not a lock: concurrent callers on one instance are
    not serialized.
    """

    def __init__(
        self,
        delay_ms: int = DEFAULT_DELAY_MS,
        timeout: float = DEFAULT_TIMEOUT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        proxies: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self.delay_ms = delay_ms
        self.timeout = timeout
        self._sleep = sleep

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Accept-Language": accept_language})
        if proxies:
            self.session.proxies.update(proxies)

    @property
    def cookies(self):
        return self.session.cookies

    def pause(self) -> None:
        if self.delay_ms:
            self._sleep(self.delay_ms / 1000.0)

    def get(self, url: str, video_id: str, **kwargs) -> requests.Response:
        return self._request("GET", url, video_id, **kwargs)

    def post_json(self, url: str, payload: Dict[str, Any], video_id: str, **kwargs) -> requests.Response:
        return self._request("POST", url, video_id, json=payload, **kwargs)

    def _request(self, method: str, url: str, video_id: str, **kwargs) -> requests.Response:
        self.pause()
        kwargs.setdefault("timeout", self.timeout)
        logger.debug(f"{method} {mask_url(url)}")

        try:
            if method == "POST":
                response = self.session.post(url, **kwargs)
            else:
                response = self.session.get(url, **kwargs)
        except requests.exceptions.RequestException as e:
            evt("http_request_failed", video_id=video_id, method=method,
                url=mask_url(url), error=str(e)[:200])
            raise HttpError(video_id, f"{method} {mask_url(url)} failed: {e}") from e

        check_http_errors(response, video_id)
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
