# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Send and connection-test operations for tenant SMTP accounts.

Both operations open one connection, run one SMTP dialogue and close it.
Nothing is pooled, cached or retried: a failed attempt is raised to the
caller immediately as a :class:`~tenant_mailer.errors.MailerError`.

Example:
    Sending with a tenant record::

        tenant = {
            "smtp_host": "smtp.example.com",
            "smtp_port": 587,
            "smtp_username": "mailer",
            "smtp_password": "secret",
            "smtp_from": "Acme <noreply@example.com>",
        }
        await send_email(tenant, "user@example.com", "Welcome", "<p>Hi</p>")

    Validating credentials typed by an administrator::

        await test_smtp_connection("smtp.example.com", 465, "mailer", "secret", True)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import aiosmtplib

from .config_loader import DEFAULT_SETTINGS, MailerSettings
from .errors import TRANSPORT_ERRORS, SendError
from .logger import get_logger
from .message import build_html_message
from .models import TenantSmtpConfig, as_tenant_config
from .transport import TransportParams, create_smtp_client

logger = get_logger("TenantMailer")


async def send_email(
    tenant: TenantSmtpConfig | Mapping[str, Any] | Any,
    to: str,
    subject: str,
    body: str,
    *,
    settings: MailerSettings | None = None,
) -> None:
    """Send an HTML email through the tenant's SMTP server.

    Args:
        tenant: Tenant SMTP configuration (model, mapping or object with
            ``smtp_*`` attributes).
        to: Recipient mailbox.
        subject: Subject line.
        body: HTML body, sent as the only MIME part.
        settings: Timeouts and implicit TLS port. Defaults apply when None.

    Raises:
        ConfigurationMissing: The tenant SMTP configuration is incomplete.
            Raised before any network activity.
        AddressError: Sender or recipient is malformed.
        BuildError: The message could not be assembled.
        SendError: Connection, TLS, authentication, timeout or SMTP failure.
    """
    settings = settings or DEFAULT_SETTINGS
    config = as_tenant_config(tenant).resolve()
    msg = build_html_message(config.sender, to, subject, body)

    params = TransportParams.build(
        config.host,
        config.port,
        config.username,
        config.password,
        config.secure,
        timeout=settings.send_timeout,
        implicit_tls_port=settings.implicit_tls_port,
    )
    smtp = create_smtp_client(params)

    logger.debug("Sending email to %s via %s:%s", to, params.host, params.port)
    await _run_bounded(smtp, params, lambda: smtp.send_message(msg))
    logger.debug("Email to %s accepted by %s", to, params.host)


async def test_smtp_connection(
    host: str,
    port: int,
    username: str,
    password: str,
    secure: bool,
    *,
    settings: MailerSettings | None = None,
) -> None:
    """Check that an SMTP server accepts a connection with these credentials.

    Connects with the same TLS rules as :func:`send_email`, authenticates,
    issues a NOOP and disconnects. No message is built.

    Raises:
        SendError: The server could not be reached, the TLS negotiation or
            login failed, or the test exceeded its timeout.
    """
    settings = settings or DEFAULT_SETTINGS
    params = TransportParams.build(
        host,
        port,
        username,
        password,
        secure,
        timeout=settings.test_timeout,
        implicit_tls_port=settings.implicit_tls_port,
    )
    smtp = create_smtp_client(params)

    logger.debug("Testing SMTP connection to %s:%s", params.host, params.port)
    await _run_bounded(smtp, params, smtp.noop)
    logger.debug("SMTP connection to %s:%s verified", params.host, params.port)


async def _run_bounded(
    smtp: aiosmtplib.SMTP,
    params: TransportParams,
    command: Callable[[], Awaitable[Any]],
) -> None:
    """Connect, run ``command``, quit, all under the call timeout.

    aiosmtplib applies ``params.timeout`` to each command; the outer
    ``wait_for`` caps the whole exchange at the same value. The socket is
    closed synchronously, so a cancelled dialogue does not wait on QUIT.
    Transport failures are raised as :class:`SendError`.
    """

    async def _dialogue() -> None:
        try:
            await smtp.connect()
            await command()
            await smtp.quit()
        finally:
            smtp.close()

    try:
        await asyncio.wait_for(_dialogue(), timeout=params.timeout)
    except asyncio.TimeoutError as exc:
        raise SendError(
            f"timed out after {params.timeout:g}s talking to {params.host}:{params.port}",
            temporary=True,
        ) from exc
    except TRANSPORT_ERRORS as exc:
        raise SendError.from_exception(exc) from exc
