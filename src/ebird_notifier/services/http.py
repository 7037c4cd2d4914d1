"""
Shared HTTP client.

A notifier run makes exactly one attempt per request: a transient failure
surfaces immediately as an error and the next scheduled run tries again.
Every request gets a timeout, whether or not the caller passes one.

Usage::

    from ebird_notifier.services.http import session

    resp = session.get("https://api.ebird.org/v2/...")
    resp.raise_for_status()
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: Single attempt; no retries or backoff within a run.
DEFAULT_RETRY = Retry(
    total=0,
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # resp.raise_for_status() decides
)

DEFAULT_TIMEOUT = 30  # seconds
USER_AGENT = "ebird-notifier/0.1"


class TimeoutHTTPAdapter(HTTPAdapter):
    """``HTTPAdapter`` that fills in a timeout when the request has none."""

    def __init__(self, *args: Any, timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> None:
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        # Session.request() passes timeout=None explicitly
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` for talking to eBird and the OAuth2 endpoint.

    Args:
        retry: Retry strategy (defaults to ``DEFAULT_RETRY``, a single attempt).
        timeout: Timeout used when a request doesn't set one.
    """
    s = requests.Session()
    adapter = TimeoutHTTPAdapter(max_retries=retry or DEFAULT_RETRY, timeout=timeout)
    for prefix in ("https://", "http://"):
        s.mount(prefix, adapter)
    s.headers["User-Agent"] = USER_AGENT
    return s


#: Shared by the eBird client and the mail sender.
session: requests.Session = create_session()
