# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transport selection for tenant SMTP connections.

TLS behavior based on port and the secure flag:

- Port 465 with secure=True: implicit TLS, encrypted from connect
- Any other port with secure=True: STARTTLS, and the upgrade is required
- secure=False: plain SMTP, no encryption

:func:`select_tls_mode` is pure decision logic; :func:`create_smtp_client`
maps its result onto the ``aiosmtplib.SMTP`` flags. Clients are created
unconnected, one per call, and never shared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import aiosmtplib

from .config_loader import IMPLICIT_TLS_PORT
from .errors import SendError
from .logger import get_logger

logger = get_logger("TenantMailer.transport")


class TlsMode(str, Enum):
    """How the SMTP connection is encrypted.

    Attributes:
        IMPLICIT: TLS handshake right after the TCP connect (SMTPS).
        STARTTLS: Plain connect, then a mandatory STARTTLS upgrade before AUTH.
        NONE: No encryption at all.
    """

    IMPLICIT = "implicit"
    STARTTLS = "starttls"
    NONE = "none"


def select_tls_mode(port: int, secure: bool, *, implicit_tls_port: int = IMPLICIT_TLS_PORT) -> TlsMode:
    """Pick the TLS mode for a ``(port, secure)`` pair."""
    if not secure:
        return TlsMode.NONE
    if port == implicit_tls_port:
        return TlsMode.IMPLICIT
    return TlsMode.STARTTLS


@dataclass(frozen=True)
class TransportParams:
    """Everything needed to open one SMTP connection."""

    host: str
    port: int
    username: str
    password: str = field(repr=False)
    tls_mode: TlsMode
    timeout: float

    @classmethod
    def build(
        cls,
        host: str,
        port: int,
        username: str,
        password: str,
        secure: bool,
        *,
        timeout: float,
        implicit_tls_port: int = IMPLICIT_TLS_PORT,
    ) -> TransportParams:
        """Validate the connection values and select the TLS mode.

        Raises:
            SendError: If the port is outside the TCP range, which no
                connection attempt could succeed with.
        """
        if not 0 < port < 65536:
            raise SendError(f"invalid SMTP port {port}")
        return cls(
            host=host,
            port=port,
            username=username,
            password=password,
            tls_mode=select_tls_mode(port, secure, implicit_tls_port=implicit_tls_port),
            timeout=timeout,
        )


def create_smtp_client(params: TransportParams) -> aiosmtplib.SMTP:
    """Create an unconnected aiosmtplib client for ``params``.

    The client logs in with the given credentials as part of ``connect()``.
    """
    # Implicit TLS: use_tls=True, start_tls=False
    # STARTTLS:     use_tls=False, start_tls=True (fails if not offered)
    # No TLS:       use_tls=False, start_tls=False
    use_tls = params.tls_mode is TlsMode.IMPLICIT
    start_tls = params.tls_mode is TlsMode.STARTTLS

    logger.debug(
        "SMTP transport for %s:%s user=%s tls=%s timeout=%ss",
        params.host,
        params.port,
        params.username,
        params.tls_mode.value,
        params.timeout,
    )
    return aiosmtplib.SMTP(
        hostname=params.host,
        port=params.port,
        username=params.username,
        password=params.password,
        use_tls=use_tls,
        start_tls=start_tls,
        timeout=params.timeout,
    )
