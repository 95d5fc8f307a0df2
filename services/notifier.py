"""Best-effort outbound email.

Every public ``send_*`` method renders a plaintext template and hands the
message to the configured transport through a bounded retry loop. Nothing
raised while rendering or sending ever reaches the caller: the account
change that triggered the email has already been committed and stays
authoritative.
"""

from __future__ import annotations

import logging
import smtplib
import threading
import time
from dataclasses import dataclass
from email.message import EmailMessage
from pathlib import Path
from typing import Callable, Protocol

from flask import Flask, current_app
from jinja2 import Environment, FileSystemLoader

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "email_templates"
EXTENSION_KEY = "notifier"

_templates = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=False,
    keep_trailing_newline=True,
)


class Transport(Protocol):
    def send(self, message: EmailMessage) -> None: ...


class SMTPTransport:
    """Deliver messages through an SMTP relay, one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password or "")
            server.send_message(message)


class MemoryTransport:
    """Collect messages in memory instead of sending them."""

    def __init__(self):
        self.outbox: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> None:
        self.outbox.append(message)


@dataclass
class MailSettings:
    transport: Transport
    sender: str
    attempts: int = 3
    backoff: float = 2.0
    run_async: bool = True
    frontend_url: str = ""


def deliver_with_retry(
    transport: Transport,
    message: EmailMessage,
    attempts: int,
    backoff: float,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Send ``message``, retrying transport errors with exponential backoff.

    Returns False once every attempt has failed; the failure is logged and
    not escalated any further.
    """

    recipient = message.get("To", "unknown")
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            logger.info("Sending email to %s (attempt %d/%d)", recipient, attempt, attempts)
            transport.send(message)
        except (smtplib.SMTPException, OSError) as exc:
            if attempt >= attempts:
                logger.error(
                    "Final failure: could not send email to %s after %d attempts: %s",
                    recipient,
                    attempts,
                    exc,
                )
                return False
            delay = backoff * (2 ** (attempt - 1))
            logger.warning(
                "Email to %s failed (%s); retrying in %.1fs", recipient, exc, delay
            )
            sleep(delay)
        else:
            logger.info("Email sent to %s", recipient)
            return True
    return False


def _deliver_in_background(transport: Transport, message: EmailMessage, attempts: int, backoff: float) -> None:
    try:
        deliver_with_retry(transport, message, attempts, backoff)
    except Exception:
        logger.exception("Background email to %s failed", message.get("To", "unknown"))


class Notifier:
    """Flask extension sending the account lifecycle emails."""

    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask, transport: Transport | None = None) -> MailSettings:
        config = app.config
        if transport is None:
            if config.get("MAIL_SUPPRESS_SEND"):
                transport = MemoryTransport()
            else:
                transport = SMTPTransport(
                    host=config.get("MAIL_SERVER", "localhost"),
                    port=int(config.get("MAIL_PORT", 587)),
                    username=config.get("MAIL_USERNAME"),
                    password=config.get("MAIL_PASSWORD"),
                    use_tls=bool(config.get("MAIL_USE_TLS", True)),
                    timeout=float(config.get("MAIL_TIMEOUT", 10)),
                )

        settings = MailSettings(
            transport=transport,
            sender=config.get("MAIL_DEFAULT_SENDER", "no-reply@localhost"),
            attempts=int(config.get("MAIL_RETRY_ATTEMPTS", 3)),
            backoff=float(config.get("MAIL_RETRY_BACKOFF", 2.0)),
            run_async=bool(config.get("MAIL_ASYNC", True)),
            frontend_url=(config.get("FRONTEND_URL") or "").rstrip("/"),
        )
        app.extensions[EXTENSION_KEY] = settings
        return settings

    @property
    def settings(self) -> MailSettings:
        return current_app.extensions[EXTENSION_KEY]

    def send_otp_email(self, to: str, otp: str, *, name: str | None = None, ttl_minutes: int = 10) -> bool:
        return self._dispatch(
            to,
            "Wellness Hub - Your OTP Verification Code",
            "otp.txt",
            otp=otp,
            name=name,
            ttl_minutes=ttl_minutes,
        )

    def send_approval_email(self, to: str, *, name: str | None = None) -> bool:
        return self._dispatch(
            to,
            "Wellness Hub - Account Approved",
            "approval.txt",
            name=name,
            login_url=self._login_url(),
        )

    def send_rejection_email(self, to: str, *, name: str | None = None, comment: str | None = None) -> bool:
        return self._dispatch(
            to,
            "Wellness Hub - Account Application Update",
            "rejection.txt",
            name=name,
            comment=comment,
        )

    def send_temporary_password_email(self, to: str, password: str) -> bool:
        return self._dispatch(
            to,
            "Wellness Hub - Password Reset",
            "temporary_password.txt",
            password=password,
            login_url=self._login_url(),
        )

    def _login_url(self) -> str:
        return f"{self.settings.frontend_url}/login"

    def _dispatch(self, to: str, subject: str, template_name: str, **context) -> bool:
        settings = self.settings
        try:
            message = EmailMessage()
            message["From"] = settings.sender
            message["To"] = to
            message["Subject"] = subject
            message.set_content(_templates.get_template(template_name).render(**context))

            if settings.run_async:
                worker = threading.Thread(
                    target=_deliver_in_background,
                    args=(settings.transport, message, settings.attempts, settings.backoff),
                    name=f"mail-{template_name}",
                    daemon=True,
                )
                worker.start()
                return True
            return deliver_with_retry(
                settings.transport, message, settings.attempts, settings.backoff
            )
        except Exception:
            logger.exception("Email dispatch to %s failed", to)
            return False


notifier = Notifier()
