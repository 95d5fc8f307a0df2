"""Tests for the email notifier and its retry policy."""

from __future__ import annotations

import logging
import smtplib
import threading
from email.message import EmailMessage

from services.notifier import MemoryTransport, deliver_with_retry, notifier


class _FlakyTransport(MemoryTransport):
    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.calls = 0

    def send(self, message):
        self.calls += 1
        if self.calls <= self.failures:
            raise smtplib.SMTPConnectError(421, "try later")
        super().send(message)


class _ExplodingTransport:
    def send(self, message):
        raise RuntimeError("unexpected transport bug")


def _message() -> EmailMessage:
    message = EmailMessage()
    message["To"] = "someone@example.com"
    message["Subject"] = "Hello"
    message.set_content("body")
    return message


def test_retry_succeeds_after_transient_failures():
    transport = _FlakyTransport(failures=2)
    delays = []

    delivered = deliver_with_retry(transport, _message(), attempts=3, backoff=1.5, sleep=delays.append)

    assert delivered is True
    assert transport.calls == 3
    assert delays == [1.5, 3.0]
    assert len(transport.outbox) == 1


def test_retry_gives_up_and_logs_terminal_failure(caplog):
    transport = _FlakyTransport(failures=10)

    with caplog.at_level(logging.ERROR, logger="services.notifier"):
        delivered = deliver_with_retry(transport, _message(), attempts=2, backoff=0, sleep=lambda _: None)

    assert delivered is False
    assert transport.calls == 2
    assert "Final failure" in caplog.text


def test_dispatch_never_raises(app):
    with app.app_context():
        app.extensions["notifier"].transport = _ExplodingTransport()

        assert notifier.send_approval_email("someone@example.com") is False


def test_templates_render_expected_content(app, outbox):
    with app.app_context():
        notifier.send_otp_email("a@example.com", "012345", name="Asha", ttl_minutes=10)
        notifier.send_approval_email("a@example.com", name="Asha")
        notifier.send_rejection_email("a@example.com", comment="Expired licence")
        notifier.send_temporary_password_email("a@example.com", "abcd1234")

    otp, approval, rejection, reset = outbox
    assert "012345" in otp.get_content()
    assert "expire in 10 minutes" in otp.get_content()
    assert approval["Subject"] == "Wellness Hub - Account Approved"
    assert "https://wellness.example/login" in approval.get_content()
    assert "Expired licence" in rejection.get_content()
    assert "Temporary Password: abcd1234" in reset.get_content()
    assert all(m["From"] == app.config["MAIL_DEFAULT_SENDER"] for m in outbox)


def test_async_dispatch_runs_in_background(app, outbox):
    app.extensions["notifier"].run_async = True
    with app.app_context():
        queued = notifier.send_approval_email("bg@example.com")

    assert queued is True
    for worker in threading.enumerate():
        if worker.name.startswith("mail-"):
            worker.join(timeout=5)
    assert [m["To"] for m in outbox] == ["bg@example.com"]


def test_async_dispatch_logs_unexpected_transport_errors(app, caplog):
    settings = app.extensions["notifier"]
    settings.run_async = True
    settings.transport = _ExplodingTransport()

    with caplog.at_level(logging.ERROR, logger="services.notifier"):
        with app.app_context():
            queued = notifier.send_approval_email("bg@example.com")
        for worker in threading.enumerate():
            if worker.name.startswith("mail-"):
                worker.join(timeout=5)

    assert queued is True
    assert "Background email to bg@example.com failed" in caplog.text
    assert "unexpected transport bug" in caplog.text
