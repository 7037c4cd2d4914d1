"""
SMTP notification sender.

Sends one HTML message per run over STARTTLS. Two login modes:

  - Password: plain SMTP ``LOGIN`` with ``smtp_password``.
  - OAuth2: the refresh token stored in ``oauth2_token_file`` is exchanged for
    an access token at the Google token endpoint, then used for ``XOAUTH2``.
    Obtaining the initial refresh token (the browser consent step) happens
    outside this program.

Every failure, from a missing token file to an SMTP rejection, is reported as
``SendError``.
"""

from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path

import requests

from ebird_notifier.exceptions import SendError
from ebird_notifier.services.http import session

TOKEN_URL = "https://oauth2.googleapis.com/token"
SMTP_TIMEOUT = 60  # seconds


@dataclass(frozen=True)
class MailConfig:
    """Everything needed to deliver a notification."""

    sender: str
    recipients: list[str]
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    password: str | None = None
    oauth2_client_id: str | None = None
    oauth2_client_secret: str | None = None
    oauth2_token_file: Path = field(default_factory=lambda: Path(".oAuthToken"))
    ca_cert_path: Path | None = None


class MailSender:
    """Delivers notification messages through an SMTP relay."""

    def __init__(self, config: MailConfig, http: requests.Session | None = None) -> None:
        self.config = config
        self.http = http or session

    def build_message(self, subject: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.config.sender
        msg["To"] = ", ".join(self.config.recipients)
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send(self, subject: str, html_body: str) -> None:
        """Send ``html_body`` to every configured recipient.

        Raises:
            SendError: Token refresh, connection, TLS, login or delivery failed.
        """
        msg = self.build_message(subject, html_body)
        cafile = str(self.config.ca_cert_path) if self.config.ca_cert_path else None
        try:
            context = ssl.create_default_context(cafile=cafile)
            with smtplib.SMTP(
                self.config.smtp_host, self.config.smtp_port, timeout=SMTP_TIMEOUT
            ) as smtp:
                smtp.starttls(context=context)
                # STARTTLS discards the EHLO state and smtp.auth() won't resend it
                smtp.ehlo()
                self._authenticate(smtp)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            msg_text = f"Failed to send notification via {self.config.smtp_host}: {e}"
            raise SendError(msg_text) from e

    def _authenticate(self, smtp: smtplib.SMTP) -> None:
        if self.config.password:
            smtp.login(self.config.sender, self.config.password)
            return
        token = self.fetch_access_token()
        auth_string = f"user={self.config.sender}\x01auth=Bearer {token}\x01\x01"
        smtp.auth("XOAUTH2", lambda challenge=None: auth_string)  # noqa: ARG005

    def read_refresh_token(self) -> str:
        path = self.config.oauth2_token_file
        try:
            token = path.read_text().strip()
        except OSError as e:
            msg = f"Could not read OAuth2 refresh token from '{path}': {e}"
            raise SendError(msg) from e
        if not token:
            msg = f"OAuth2 refresh token file '{path}' is empty"
            raise SendError(msg)
        return token

    def fetch_access_token(self) -> str:
        """Exchange the stored refresh token for a short-lived access token."""
        if not (self.config.oauth2_client_id and self.config.oauth2_client_secret):
            msg = "OAuth2 client id and secret are required when no SMTP password is set"
            raise SendError(msg)
        data = {
            "client_id": self.config.oauth2_client_id,
            "client_secret": self.config.oauth2_client_secret,
            "refresh_token": self.read_refresh_token(),
            "grant_type": "refresh_token",
        }
        try:
            resp = self.http.post(TOKEN_URL, data=data)
            resp.raise_for_status()
            token = resp.json().get("access_token")
        except (requests.RequestException, ValueError) as e:
            msg = f"OAuth2 token refresh failed: {e}"
            raise SendError(msg) from e
        if not token:
            msg = "OAuth2 token response did not include an access token"
            raise SendError(msg)
        return str(token)
