"""
eBird API 2.0 client.

Low-level HTTP client for the observation endpoints. The API key is sent with
every request in the ``X-eBirdApiToken`` header; it is held by the client
instance rather than any module-level state.

API docs: https://documenter.getpostman.com/view/664302/S1ENwy59
"""

from __future__ import annotations

from typing import Any

import requests

from ebird_notifier.exceptions import FetchError
from ebird_notifier.services.http import session

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
API_BASE = "https://api.ebird.org/v2"
TOKEN_HEADER = "X-eBirdApiToken"
MAX_DAYS_BACK = 30  # API ceiling for the ``back`` parameter
CHECKLIST_URL = "https://ebird.org/checklist/{sub_id}"


def _describe_errors(payload: Any) -> str:
    """Flatten an eBird ``{"errors": [...]}`` payload into one line."""
    if not isinstance(payload, dict):
        return ""
    errors = payload.get("errors") or []
    parts = []
    for err in errors:
        if isinstance(err, dict):
            parts.append(
                f"{err.get('code', '?')}: {err.get('title', '?')} ({err.get('status', '?')})"
            )
    return "; ".join(parts)


class EBirdClient:
    """Authenticated access to the eBird observation API."""

    def __init__(self, api_key: str, http: requests.Session | None = None) -> None:
        self.api_key = api_key
        self.http = http or session

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET an endpoint and return the decoded JSON body.

        Raises:
            FetchError: Transport failure, non-success status, a body that is not
                JSON, or an eBird error payload.
        """
        url = f"{API_BASE}/{endpoint}"
        try:
            resp = self.http.get(url, params=params or {}, headers={TOKEN_HEADER: self.api_key})
        except requests.RequestException as e:
            msg = f"Request to {url} failed: {e}"
            raise FetchError(msg) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            detail = _describe_errors(data)
            msg = f"eBird returned HTTP {resp.status_code}" + (f": {detail}" if detail else "")
            raise FetchError(msg) from e

        if data is None:
            msg = f"Response from {url} is not valid JSON"
            raise FetchError(msg)
        if isinstance(data, dict) and "errors" in data:
            msg = f"eBird reported errors: {_describe_errors(data)}"
            raise FetchError(msg)
        return data

    def get_recent_notable(self, region: str, days_back: int) -> list[dict[str, Any]]:
        """GET /data/obs/{region}/recent/notable with full detail."""
        data = self._get(
            f"data/obs/{region}/recent/notable",
            {"back": days_back, "detail": "full"},
        )
        if not isinstance(data, list):
            msg = f"Expected a list of observations, got {type(data).__name__}"
            raise FetchError(msg)
        return data
