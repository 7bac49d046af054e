# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mailer settings and their loading from INI configuration files.

The dispatcher itself never reads files or environment variables. Host
applications that keep their settings in an INI file can build a
:class:`MailerSettings` with :func:`load_mailer_settings` and pass it to the
send and test operations.

Example:
    Configuration file format (config.ini)::

        [smtp]
        send_timeout = 10
        test_timeout = 5
        implicit_tls_port = 465

    Loading::

        settings = load_mailer_settings("/etc/app/config.ini")
        await send_email(tenant, to, subject, body, settings=settings)
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from pathlib import Path

from .logger import get_logger

DEFAULT_SEND_TIMEOUT = 10.0
DEFAULT_TEST_TIMEOUT = 5.0
IMPLICIT_TLS_PORT = 465

logger = get_logger("TenantMailer.config")


@dataclass(frozen=True)
class MailerSettings:
    """Tunables shared by every mailer call.

    Attributes:
        send_timeout: Seconds allowed for a send, per SMTP operation and for
            the whole dialogue.
        test_timeout: Seconds allowed for a connection test.
        implicit_tls_port: Port on which ``secure`` means TLS from connect
            instead of STARTTLS.
    """

    send_timeout: float = DEFAULT_SEND_TIMEOUT
    test_timeout: float = DEFAULT_TEST_TIMEOUT
    implicit_tls_port: int = IMPLICIT_TLS_PORT

    def __post_init__(self) -> None:
        if self.send_timeout <= 0:
            raise ValueError("send_timeout must be positive")
        if self.test_timeout <= 0:
            raise ValueError("test_timeout must be positive")
        if not 0 < self.implicit_tls_port < 65536:
            raise ValueError("implicit_tls_port must be a valid TCP port")


DEFAULT_SETTINGS = MailerSettings()


def load_mailer_settings(config_path: str | Path) -> MailerSettings:
    """Load mailer settings from the ``[smtp]`` section of an INI file.

    Missing keys, or keys that do not parse, fall back to the defaults.

    Args:
        config_path: Path to the INI file.

    Returns:
        MailerSettings built from the file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    if not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    config = configparser.ConfigParser()
    config.read(config_path)

    if not config.has_section("smtp"):
        logger.info("No [smtp] section in config, using defaults")
        return DEFAULT_SETTINGS

    def get_float(key: str, default: float) -> float:
        try:
            value = config.getfloat("smtp", key, fallback=default)
        except ValueError:
            logger.warning(f"Invalid float for {key}, using default {default}")
            return default
        if value <= 0:
            logger.warning(f"Non-positive value for {key}, using default {default}")
            return default
        return value

    def get_port(key: str, default: int) -> int:
        try:
            value = config.getint("smtp", key, fallback=default)
        except ValueError:
            logger.warning(f"Invalid int for {key}, using default {default}")
            return default
        if not 0 < value < 65536:
            logger.warning(f"Port out of range for {key}, using default {default}")
            return default
        return value

    return MailerSettings(
        send_timeout=get_float("send_timeout", DEFAULT_SEND_TIMEOUT),
        test_timeout=get_float("test_timeout", DEFAULT_TEST_TIMEOUT),
        implicit_tls_port=get_port("implicit_tls_port", IMPLICIT_TLS_PORT),
    )
