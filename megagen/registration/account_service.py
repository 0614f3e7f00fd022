from __future__ import annotations

import importlib
from typing import Any, Protocol


# Opaque per-attempt value returned by `register`; only ever handed back to `verify`.
RegistrationState = Any


class AccountService(Protocol):
    """Remote account service: start a registration, then finalize it with the emailed token."""

    def register(self, email: str, password: str, name: str, proxy: str | None = None) -> RegistrationState:
        ...

    def verify(self, state: RegistrationState, token: str, proxy: str | None = None) -> None:
        ...


def load_account_service(ref: str) -> AccountService:
    """Import an account service from a `package.module:attribute` reference.

    A class or zero-argument factory is called; anything else is used as the service itself.
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Account service reference must look like 'package.module:attribute', got {ref!r}")
    module = importlib.import_module(module_name)
    target = module
    for part in attr.split("."):
        target = getattr(target, part)
    if isinstance(target, type) or (callable(target) and not hasattr(target, "register")):
        target = target()
    return target
