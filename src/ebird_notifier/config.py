"""Application settings.

Settings come from two places:

  - A key-value config file (``KEY = value`` per line, ``#`` comments), the
    format the notifier has always used. ``EXCLUDE`` and ``RECIPIENT`` may be
    repeated.
  - Environment variables with the ``EBIRD_NOTIFIER_`` prefix (and ``.env``),
    which fill in anything the file does not set.

Everything is validated before a run starts; problems raise ``ConfigError``.

Example config file::

    EBIRD_API_KEY = abc123
    REGION_CODE = US-CO
    DAYS_BACK = 2
    EXCLUDE = Canada Goose
    EXCLUDE = Eurasian Collared-Dove
    SENDER = birds@example.com
    RECIPIENT = me@example.com
    OAUTH_CLIENT_ID = ...
    OAUTH_CLIENT_SECRET = ...
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ebird_notifier.datasources.ebird.client import MAX_DAYS_BACK
from ebird_notifier.exceptions import ConfigError
from ebird_notifier.renderers.notification import DEFAULT_SUBJECT
from ebird_notifier.services.mail import MailConfig

#: Config-file key -> Settings field.
FILE_KEYS: dict[str, str] = {
    "PREVIOUS_NOTIFICATION_FILE": "ledger_path",
    "EBIRD_API_KEY": "ebird_api_key",
    "REGION_CODE": "region_code",
    "EXCLUDE": "exclude_species",
    "DAYS_BACK": "days_back",
    "SENDER": "sender",
    "RECIPIENT": "recipients",
    "OAUTH_CLIENT_ID": "oauth2_client_id",
    "OAUTH_CLIENT_SECRET": "oauth2_client_secret",
    "OAUTH_TOKEN_FILE": "oauth2_token_file",
    "CA_CERT_PATH": "ca_cert_path",
    "SMTP_HOST": "smtp_host",
    "SMTP_PORT": "smtp_port",
    "SMTP_PASSWORD": "smtp_password",
    "SUBJECT": "subject",
}
REPEATABLE_KEYS = {"EXCLUDE", "RECIPIENT"}


class Settings(BaseSettings):
    """Notifier settings."""

    model_config = SettingsConfigDict(
        env_prefix="EBIRD_NOTIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # eBird query
    ebird_api_key: SecretStr
    region_code: str = Field(..., min_length=1)
    days_back: int = Field(default=2, gt=0, le=MAX_DAYS_BACK)
    exclude_species: list[str] = Field(default_factory=list)

    # Ledger ("" disables persistence)
    ledger_path: str = ".previouslyNotified"

    # Mail
    sender: str = Field(..., min_length=1)
    recipients: list[str] = Field(..., min_length=1)
    subject: str = DEFAULT_SUBJECT
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = Field(default=587, gt=0, le=65535)
    smtp_password: SecretStr | None = None
    oauth2_client_id: str | None = None
    oauth2_client_secret: SecretStr | None = None
    oauth2_token_file: Path = Path(".oAuthToken")
    ca_cert_path: Path | None = None

    @model_validator(mode="after")
    def _check_mail_auth(self) -> Settings:
        if self.smtp_password is None and not (
            self.oauth2_client_id and self.oauth2_client_secret
        ):
            msg = "either SMTP_PASSWORD or both OAUTH_CLIENT_ID and OAUTH_CLIENT_SECRET must be set"
            raise ValueError(msg)
        return self

    def mail_config(self) -> MailConfig:
        return MailConfig(
            sender=self.sender,
            recipients=list(self.recipients),
            smtp_host=self.smtp_host,
            smtp_port=self.smtp_port,
            password=self.smtp_password.get_secret_value() if self.smtp_password else None,
            oauth2_client_id=self.oauth2_client_id,
            oauth2_client_secret=(
                self.oauth2_client_secret.get_secret_value() if self.oauth2_client_secret else None
            ),
            oauth2_token_file=self.oauth2_token_file,
            ca_cert_path=self.ca_cert_path,
        )


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a ``KEY = value`` config file into Settings keyword arguments.

    Raises:
        ConfigError: The file can't be read, a line has no ``=``, a key is
            unknown, or a non-repeatable key appears twice.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read config file '{path}': {e}"
        raise ConfigError(msg) from e

    values: dict[str, Any] = {}
    problems: list[str] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip().upper()
        value = value.strip()
        if not sep:
            problems.append(f"line {lineno}: expected KEY = value")
            continue
        field = FILE_KEYS.get(key)
        if field is None:
            problems.append(f"line {lineno}: unknown key {key}")
            continue
        if key in REPEATABLE_KEYS:
            values.setdefault(field, []).append(value)
        elif field in values:
            problems.append(f"line {lineno}: {key} specified more than once")
        else:
            values[field] = value

    if problems:
        msg = f"Invalid config file '{path}': " + "; ".join(problems)
        raise ConfigError(msg)
    return values


def _describe(e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"])
        problems.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(problems)


def get_settings(config_file: Path | None = None, **overrides: Any) -> Settings:
    """Build validated settings from an optional config file plus overrides.

    Raises:
        ConfigError: Missing or invalid settings.
    """
    values = read_config_file(config_file) if config_file is not None else {}
    values.update(overrides)
    try:
        return Settings(**values)
    except ValidationError as e:
        msg = f"Invalid configuration: {_describe(e)}"
        raise ConfigError(msg) from None
