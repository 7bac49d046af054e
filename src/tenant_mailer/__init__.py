"""Per-tenant SMTP dispatch for transactional email.

This package sends single-part HTML emails through the SMTP server configured
on a tenant, and validates SMTP credentials entered by an administrator:

- TLS mode chosen from port and secure flag (implicit TLS, STARTTLS, none)
- Fixed per-call timeouts, one connection per call, no retries
- Closed error taxonomy (ConfigurationMissing, AddressError, BuildError,
  SendError)

Example:
    Sending a notification::

        from tenant_mailer import send_email, SendError

        try:
            await send_email(tenant, "user@example.com", "Invoice", html)
        except SendError as exc:
            queue_for_retry(exc)

Authors:
    Softwell S.r.l.
"""

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0

from .config_loader import MailerSettings, load_mailer_settings
from .errors import AddressError, BuildError, ConfigurationMissing, MailerError, SendError
from .mailer import send_email, test_smtp_connection
from .models import ResolvedSmtpConfig, TenantSmtpConfig
from .transport import TlsMode, TransportParams, select_tls_mode

__all__ = [
    "AddressError",
    "BuildError",
    "ConfigurationMissing",
    "MailerError",
    "MailerSettings",
    "ResolvedSmtpConfig",
    "SendError",
    "TenantSmtpConfig",
    "TlsMode",
    "TransportParams",
    "load_mailer_settings",
    "select_tls_mode",
    "send_email",
    "test_smtp_connection",
]
