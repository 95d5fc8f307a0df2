"""Credential helpers shared by the auth workflow."""

from __future__ import annotations

import secrets

OTP_LENGTH = 6
TEMPORARY_PASSWORD_LENGTH = 8


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Return a zero-padded numeric one-time code."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def generate_temporary_password(length: int = TEMPORARY_PASSWORD_LENGTH) -> str:
    return secrets.token_hex(length)[:length]
