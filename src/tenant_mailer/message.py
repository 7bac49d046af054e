# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mailbox parsing and HTML message construction."""

from __future__ import annotations

from email.errors import MessageError
from email.headerregistry import Address
from email.message import EmailMessage
from email.utils import formatdate, getaddresses, make_msgid

from email_validator import SPECIAL_USE_DOMAIN_NAMES, EmailNotValidError, validate_email

from .errors import AddressError, BuildError

# Special-use names (localhost, .local, .test) are rejected outright by
# email-validator, but they are valid hosts behind a private relay. Their
# syntax is checked under this label instead.
_NEUTRAL_TLD = "example"


def parse_mailbox(value: str) -> Address:
    """Parse a single mailbox, ``addr`` or ``Display Name <addr>``.

    Only syntax is checked; the domain is never resolved.

    Raises:
        AddressError: If the value is empty, holds several addresses, or
            the address part is not valid.
    """
    if not value or not value.strip():
        raise AddressError(value, "empty address")

    mailboxes = getaddresses([value])
    if len(mailboxes) != 1:
        raise AddressError(value, "expected a single address")
    display_name, addr_spec = mailboxes[0]
    if not addr_spec:
        raise AddressError(value, "missing address")

    try:
        return Address(display_name=display_name, addr_spec=_validate_addr_spec(addr_spec))
    except EmailNotValidError as exc:
        raise AddressError(value, str(exc)) from exc
    except (ValueError, MessageError) as exc:
        raise AddressError(value, str(exc)) from exc


def build_html_message(sender: str, recipient: str, subject: str, body: str) -> EmailMessage:
    """Build a single-part ``text/html`` message.

    Raises:
        AddressError: If sender or recipient is malformed.
        BuildError: If a header or the body cannot be set.
    """
    from_addr = parse_mailbox(sender)
    to_addr = parse_mailbox(recipient)

    msg = EmailMessage()
    try:
        msg["From"] = from_addr
        msg["To"] = to_addr
        msg["Subject"] = subject
        msg["Date"] = formatdate(localtime=True)
        msg["Message-ID"] = make_msgid(domain=from_addr.domain or None)
        msg.set_content(body, subtype="html")
    except (ValueError, TypeError, MessageError) as exc:
        raise BuildError(str(exc)) from exc
    return msg


def _validate_addr_spec(addr_spec: str) -> str:
    """Check address syntax only and return the normalized address.

    Single-label and special-use domains are accepted: a tenant relaying
    through a local server may well send as ``noreply@localhost``.
    """
    local_part, at, domain = addr_spec.rpartition("@")
    labels = domain.split(".")
    special = bool(at) and labels[-1].lower() in SPECIAL_USE_DOMAIN_NAMES
    candidate = addr_spec
    if special:
        candidate = f"{local_part}@{'.'.join([*labels[:-1], _NEUTRAL_TLD])}"

    validated = validate_email(
        candidate,
        check_deliverability=False,
        globally_deliverable=False,
        test_environment=True,
    )
    if special:
        return f"{validated.local_part}@{domain.lower()}"
    return validated.normalized
