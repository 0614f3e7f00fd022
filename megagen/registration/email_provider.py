from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class InboxMessage:
    id: str
    sender: str
    subject: str


@dataclass(frozen=True)
class MessageDetails:
    body: str


class EmailProvider(Protocol):
    """Disposable inbox provider: create an address, read its messages, drop it.

    Implementations must be safe to share between concurrent generation attempts.
    """

    def create_address(self, alias: str) -> str:
        ...

    def list_messages(self, address: str) -> list[InboxMessage]:
        ...

    def fetch_message(self, address: str, message_id: str) -> MessageDetails:
        ...

    def delete_address(self, address: str) -> None:
        ...
