from __future__ import annotations

import threading
from typing import Any

import pytest

from megagen.config import GeneratorConfig
from megagen.errors import MailError
from megagen.registration.email_provider import InboxMessage, MessageDetails
from megagen.registration.generator import AccountGenerator


class FakeClock:
    """Monotonic clock that only moves when `sleep` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeMail:
    """In-memory inbox. `polls` is consumed one listing per call; the last entry repeats.

    Safe to share between threads.
    """

    def __init__(self, polls: list[list[InboxMessage]] | None = None, bodies: dict[str, str] | None = None) -> None:
        self.polls = polls or [[]]
        self.bodies = bodies or {}
        self.created: list[str] = []
        self.deleted: list[str] = []
        self.fetched: list[str] = []
        self.list_calls = 0
        self.fail_create = False
        self.fail_list = False
        self.fail_delete = False
        self.connects = 0
        self._lock = threading.Lock()

    def connect(self) -> None:
        self.connects += 1

    def create_address(self, alias: str) -> str:
        if self.fail_create:
            raise MailError("create failed")
        address = f"{alias}@guerrillamailblock.com"
        with self._lock:
            self.created.append(address)
        return address

    def list_messages(self, address: str) -> list[InboxMessage]:
        if self.fail_list:
            raise MailError("list failed")
        with self._lock:
            idx = min(self.list_calls, len(self.polls) - 1)
            self.list_calls += 1
        return list(self.polls[idx])

    def fetch_message(self, address: str, message_id: str) -> MessageDetails:
        with self._lock:
            self.fetched.append(message_id)
        return MessageDetails(body=self.bodies.get(message_id, ""))

    def delete_address(self, address: str) -> None:
        if self.fail_delete:
            raise MailError("delete failed")
        with self._lock:
            self.deleted.append(address)


class FakeAccounts:
    def __init__(self) -> None:
        self.registered: list[tuple[str, str, str, str | None]] = []
        self.verified: list[tuple[Any, str, str | None]] = []
        self.register_error: Exception | None = None
        self.verify_error: Exception | None = None
        self.register_calls = 0
        self._lock = threading.Lock()

    def register(self, email: str, password: str, name: str, proxy: str | None = None) -> Any:
        with self._lock:
            self.register_calls += 1
            if self.register_error is not None:
                raise self.register_error
            self.registered.append((email, password, name, proxy))
            return {"email": email, "seq": len(self.registered)}

    def verify(self, state: Any, token: str, proxy: str | None = None) -> None:
        if self.verify_error is not None:
            raise self.verify_error
        with self._lock:
            self.verified.append((state, token, proxy))


def mega_message(mail_id: str = "1") -> InboxMessage:
    return InboxMessage(id=mail_id, sender="welcome@mega.nz", subject="MEGA email verification required")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def accounts() -> FakeAccounts:
    return FakeAccounts()


@pytest.fixture
def make_generator(clock, accounts):
    def _make(mail: FakeMail, timeout_sec: float = 10.0, poll_interval_sec: float = 5.0, proxy: str | None = None) -> AccountGenerator:
        cfg = GeneratorConfig(timeout_sec=timeout_sec, poll_interval_sec=poll_interval_sec, proxy=proxy)
        return AccountGenerator(
            mail=mail,
            accounts=accounts,
            config=cfg,
            alias_supplier=lambda: "alias01",
            clock=clock,
            sleep=clock.sleep,
        )
    return _make
