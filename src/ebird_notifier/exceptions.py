"""Error taxonomy for a notifier run.

Every failure is terminal for the run: nothing is retried internally. Each
exception carries the ``stage`` it belongs to so the CLI can print a single
diagnostic line naming where the run stopped.
"""

from __future__ import annotations


class NotifierError(Exception):
    """Base exception for ebird-notifier."""

    stage = "run"


class ConfigError(NotifierError):
    """Configuration is missing or invalid (raised before the pipeline starts)."""

    stage = "config"


class DecodeError(NotifierError):
    """A date/time token could not be decoded or parsed."""

    stage = "decode"


class FetchError(NotifierError):
    """Fetching or normalizing observations from eBird failed."""

    stage = "fetch"


class LoadError(NotifierError):
    """The ledger file exists but could not be read or is malformed."""

    stage = "load-ledger"


class SaveError(NotifierError):
    """The ledger file could not be written."""

    stage = "persist-ledger"


class SendError(NotifierError):
    """The notification e-mail could not be sent."""

    stage = "send-notification"
