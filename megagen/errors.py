from __future__ import annotations


class GenerationError(Exception):
    """Base class for every failure of a generation attempt."""


class MailError(GenerationError):
    """Disposable inbox request failed (create, list, fetch or delete)."""


class AccountServiceError(GenerationError):
    """Account service request failed (register or verify)."""


class EmailTimeout(GenerationError):
    def __init__(self, message: str = "Timeout waiting for confirmation email") -> None:
        super().__init__(message)


class NoConfirmationLink(GenerationError):
    def __init__(self, message: str = "No confirmation link found in email") -> None:
        super().__init__(message)


class GenerationCancelled(GenerationError):
    def __init__(self, message: str = "Generation attempt cancelled") -> None:
        super().__init__(message)
