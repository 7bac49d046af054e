# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by the tenant mailer.

The taxonomy is closed: every failure surfaced by :func:`send_email` or
:func:`test_smtp_connection` is one of the four subclasses of
:class:`MailerError`. Lower-layer exceptions are always chained as
``__cause__`` so callers keep the original diagnostics.

Each class exposes a stable ``code`` string, suitable for API responses or
for deciding whether to queue a retry upstream.
"""

from __future__ import annotations

import asyncio
import ssl
from collections.abc import Iterable

import aiosmtplib

# Exceptions from the transport layer that mean "the SMTP attempt failed".
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    aiosmtplib.SMTPException,
    asyncio.TimeoutError,
    TimeoutError,
    OSError,
)


class MailerError(Exception):
    """Base class for every error raised by the mailer."""

    code = "mailer_error"


class ConfigurationMissing(MailerError):
    """The tenant has no complete SMTP configuration."""

    code = "configuration_missing"

    def __init__(self, missing: Iterable[str] = ()):
        self.missing = tuple(missing)
        message = "SMTP configuration missing"
        if self.missing:
            message = f"{message}: {', '.join(self.missing)}"
        super().__init__(message)


class AddressError(MailerError):
    """A sender or recipient is not a valid mail address."""

    code = "invalid_address"

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid email address {address!r}: {reason}")


class BuildError(MailerError):
    """The message could not be assembled."""

    code = "build_error"

    def __init__(self, reason: str):
        super().__init__(f"Failed to build email: {reason}")


class SendError(MailerError):
    """The SMTP transport failed.

    Connection, TLS, authentication, timeout and protocol failures all end
    up here. ``smtp_code`` and ``temporary`` are informational only.

    Attributes:
        smtp_code: Reply code sent by the server, or None when the failure
            happened below the SMTP dialogue (DNS, TCP, TLS, timeout).
        temporary: True when the same attempt could succeed later
            (timeouts, connection errors, 4xx replies).
    """

    code = "send_error"

    def __init__(self, reason: str, *, smtp_code: int | None = None, temporary: bool = False):
        self.smtp_code = smtp_code
        self.temporary = temporary
        super().__init__(f"Failed to send email: {reason}")

    @classmethod
    def from_exception(cls, exc: BaseException) -> SendError:
        """Wrap a transport exception, extracting its SMTP code if any."""
        smtp_code, temporary = classify_transport_error(exc)
        reason = str(exc) or type(exc).__name__
        return cls(reason, smtp_code=smtp_code, temporary=temporary)


def classify_transport_error(exc: BaseException) -> tuple[int | None, bool]:
    """Return ``(smtp_code, temporary)`` for a transport exception.

    aiosmtplib stores the reply code on ``code`` for response errors;
    timeouts and socket errors carry none and are treated as temporary.
    """
    smtp_code = None
    if isinstance(exc, aiosmtplib.SMTPResponseException):
        smtp_code = exc.code

    if isinstance(exc, (aiosmtplib.SMTPTimeoutError, aiosmtplib.SMTPConnectError)):
        return smtp_code, True
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return smtp_code, True

    if smtp_code is not None:
        return smtp_code, 400 <= smtp_code < 500

    # Remaining OSErrors (DNS failures, unreachable networks) may clear up;
    # SSL errors subclass OSError but are configuration problems.
    if isinstance(exc, OSError) and not isinstance(exc, ssl.SSLError):
        return None, True
    return None, False
