"""Tests for the shared HTTP client."""

from __future__ import annotations

from unittest.mock import patch

import requests
from urllib3.util.retry import Retry

from ebird_notifier.services.http import (
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    TimeoutHTTPAdapter,
    create_session,
    session,
)


class TestDefaultRetry:
    """A run makes exactly one attempt per request."""

    def test_no_retries(self) -> None:
        assert DEFAULT_RETRY.total == 0

    def test_status_left_to_caller(self) -> None:
        assert DEFAULT_RETRY.raise_on_status is False


class TestCreateSession:
    """Verify session factory."""

    def test_returns_session(self) -> None:
        s = create_session()
        assert isinstance(s, requests.Session)

    def test_mounts_https_adapter(self) -> None:
        s = create_session()
        adapter = s.get_adapter("https://example.com")
        assert isinstance(adapter, TimeoutHTTPAdapter)

    def test_mounts_http_adapter(self) -> None:
        s = create_session()
        adapter = s.get_adapter("http://example.com")
        assert isinstance(adapter, TimeoutHTTPAdapter)

    def test_adapter_has_single_attempt_retry(self) -> None:
        s = create_session()
        adapter = s.get_adapter("https://example.com")
        assert adapter.max_retries.total == 0

    def test_custom_retry(self) -> None:
        custom = Retry(total=3, backoff_factor=1)
        s = create_session(retry=custom)
        adapter = s.get_adapter("https://example.com")
        assert adapter.max_retries.total == 3

    def test_user_agent_header(self) -> None:
        s = create_session()
        assert "ebird-notifier" in s.headers["User-Agent"]

    def test_default_timeout_injected(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 42

    def test_explicit_timeout_not_overridden(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep, timeout=99)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 99

    def test_default_timeout_applied_to_get(self) -> None:
        s = create_session(timeout=42)
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.get("https://example.com")
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 42


class TestModuleSession:
    """Verify the module-level session."""

    def test_session_is_configured(self) -> None:
        adapter = session.get_adapter("https://example.com")
        assert adapter.max_retries.total == 0

    def test_default_timeout(self) -> None:
        assert DEFAULT_TIMEOUT == 30
