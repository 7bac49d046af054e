# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pydantic model of the per-tenant SMTP configuration.

The tenant record is owned by the host application; the mailer only reads
the ``smtp_*`` fields from it. A configuration is usable only when host,
port, username, password and sender are all present. Anything less is
treated as "no SMTP configured", never as a partial configuration.

Models:
    - TenantSmtpConfig: SMTP fields as stored on the tenant (all optional)
    - ResolvedSmtpConfig: Complete configuration ready for a transport
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationMissing


@dataclass(frozen=True)
class ResolvedSmtpConfig:
    """SMTP configuration with every required value present."""

    host: str
    port: int
    username: str
    password: str = field(repr=False)
    sender: str
    secure: bool = True


class TenantSmtpConfig(BaseModel):
    """SMTP settings stored on a tenant record.

    Unrelated tenant fields are ignored, so a whole tenant row (dict or ORM
    object) can be validated directly.

    Attributes:
        smtp_host: SMTP server hostname.
        smtp_port: SMTP server port.
        smtp_username: Login user.
        smtp_password: Login password.
        smtp_from: Sender mailbox, ``addr`` or ``Name <addr>``.
        smtp_secure: Encrypt the connection. None means True.
    """

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "smtp_host",
        "smtp_port",
        "smtp_username",
        "smtp_password",
        "smtp_from",
    )

    smtp_host: Annotated[
        str | None,
        Field(default=None, description="SMTP server hostname")
    ]
    smtp_port: Annotated[
        int | None,
        Field(default=None, description="SMTP server port")
    ]
    smtp_username: Annotated[
        str | None,
        Field(default=None, description="SMTP login user")
    ]
    smtp_password: Annotated[
        str | None,
        Field(default=None, repr=False, description="SMTP login password")
    ]
    smtp_from: Annotated[
        str | None,
        Field(default=None, description="Sender mailbox")
    ]
    smtp_secure: Annotated[
        bool | None,
        Field(default=None, description="Use TLS (None = True)")
    ]

    @property
    def secure(self) -> bool:
        """Effective secure flag."""
        return True if self.smtp_secure is None else self.smtp_secure

    @property
    def missing_fields(self) -> list[str]:
        return [name for name in self.REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def is_configured(self) -> bool:
        return not self.missing_fields

    def resolve(self) -> ResolvedSmtpConfig:
        """Return the complete configuration.

        Raises:
            ConfigurationMissing: If any required field is unset.
        """
        missing = self.missing_fields
        if missing:
            raise ConfigurationMissing(missing)
        return ResolvedSmtpConfig(
            host=self.smtp_host,
            port=self.smtp_port,
            username=self.smtp_username,
            password=self.smtp_password,
            sender=self.smtp_from,
            secure=self.secure,
        )


def as_tenant_config(tenant: TenantSmtpConfig | Mapping[str, Any] | Any) -> TenantSmtpConfig:
    """Coerce a tenant record into a :class:`TenantSmtpConfig`.

    Accepts the model itself, a mapping (e.g. a database row), or any object
    exposing ``smtp_*`` attributes.
    """
    if isinstance(tenant, TenantSmtpConfig):
        return tenant
    if isinstance(tenant, Mapping):
        return TenantSmtpConfig.model_validate(dict(tenant))
    return TenantSmtpConfig.model_validate(tenant, from_attributes=True)
