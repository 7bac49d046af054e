"""Shared fixtures: a recording stand-in for ``aiosmtplib.SMTP``."""

import asyncio

import pytest


class DummySMTP:
    """Records constructor flags and the calls made on the client."""

    instances: list["DummySMTP"] = []
    connect_error: BaseException | None = None
    send_error: BaseException | None = None
    send_delay: float = 0.0
    connect_delay: float = 0.0

    def __init__(self, hostname, port, username=None, password=None, use_tls=False, start_tls=None, timeout=None):
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.start_tls = start_tls
        self.timeout = timeout
        self.connected = False
        self.quit_sent = False
        self.closed = False
        self.sent = []
        self.noops = 0
        type(self).instances.append(self)

    async def connect(self):
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def quit(self):
        self.quit_sent = True
        return 221, "Bye"

    def close(self):
        self.closed = True

    async def send_message(self, message):
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)
        return {}, "OK"

    async def noop(self):
        self.noops += 1
        return 250, "OK"


@pytest.fixture
def fake_smtp(monkeypatch):
    """Replace aiosmtplib.SMTP with a fresh DummySMTP subclass."""

    class FakeSMTP(DummySMTP):
        instances = []

    monkeypatch.setattr("tenant_mailer.transport.aiosmtplib.SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def tenant():
    return {
        "id": "acme",
        "name": "Acme Corp",
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_username": "mailer",
        "smtp_password": "secret",
        "smtp_from": "Acme <noreply@example.com>",
        "smtp_secure": True,
    }
