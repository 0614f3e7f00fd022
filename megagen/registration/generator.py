from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from typing import Callable

from loguru import logger

from ..account import GeneratedAccount
from ..config import GeneratorConfig
from ..errors import AccountServiceError, GenerationCancelled, MailError
from .account_service import AccountService
from .confirmation import wait_for_confirmation
from .email_provider import EmailProvider
from .guerrillamail_http import GuerrillaMailHttpClient
from .utils import generate_random_alias, generate_random_name


class AccountGenerator:
    """Creates accounts confirmed through a disposable inbox.

    Build one with `AccountGenerator.builder()...build()`. Each `generate` call is an
    independent attempt and calls may run concurrently from several threads.

    An attempt is never retried or rolled back: if it fails after the address was created
    or after registration succeeded, the mailbox and the pending registration stay behind.
    """

    def __init__(
        self,
        mail: EmailProvider,
        accounts: AccountService,
        config: GeneratorConfig,
        alias_supplier: Callable[[], str] = generate_random_alias,
        name_supplier: Callable[[], str] = generate_random_name,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.mail = mail
        self.accounts = accounts
        self.config = config
        self._alias_supplier = alias_supplier
        self._name_supplier = name_supplier
        self._clock = clock
        self._sleep = sleep

    @staticmethod
    def builder() -> "AccountGeneratorBuilder":
        return AccountGeneratorBuilder()

    def generate(self, password: str, name: str | None = None, cancel: threading.Event | None = None) -> GeneratedAccount:
        """Create and confirm one account; a random display name is used when `name` is None."""
        account_name = name if name is not None else self._name_supplier()
        return self._run(password, account_name, cancel)

    def generate_with_name(self, password: str, name: str, cancel: threading.Event | None = None) -> GeneratedAccount:
        return self._run(password, name, cancel)

    def _check_cancel(self, cancel: threading.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            raise GenerationCancelled()

    def _run(self, password: str, account_name: str, cancel: threading.Event | None) -> GeneratedAccount:
        proxy = self.config.proxy
        alias = self._alias_supplier()

        self._check_cancel(cancel)
        try:
            email = self.mail.create_address(alias)
        except MailError:
            raise
        except Exception as exc:
            raise MailError(f"create_address: {type(exc).__name__}: {exc}") from exc
        logger.info(f"[gen] Registering {email} as {account_name!r}")

        self._check_cancel(cancel)
        try:
            state = self.accounts.register(email, password, account_name, proxy)
        except AccountServiceError:
            raise
        except Exception as exc:
            raise AccountServiceError(f"register: {type(exc).__name__}: {exc}") from exc

        key = wait_for_confirmation(
            self.mail,
            email,
            timeout_sec=self.config.timeout_sec,
            poll_interval_sec=self.config.poll_interval_sec,
            domain=self.config.service_domain,
            cancel=cancel,
            clock=self._clock,
            sleep=self._sleep,
        )

        self._check_cancel(cancel)
        try:
            self.accounts.verify(state, key, proxy)
        except AccountServiceError:
            raise
        except Exception as exc:
            raise AccountServiceError(f"verify: {type(exc).__name__}: {exc}") from exc
        logger.info(f"[gen] Confirmed {email}")

        try:
            self.mail.delete_address(email)
        except Exception as exc:
            logger.debug(f"[gen] Cleanup of {email} failed (ignored): {exc}")

        return GeneratedAccount(email=email, password=password, name=account_name)


@dataclass(frozen=True)
class AccountGeneratorBuilder:
    """Immutable builder: every setter returns a new builder."""
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    mail: EmailProvider | None = None
    accounts: AccountService | None = None

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "AccountGeneratorBuilder":
        return cls(config=config)

    def proxy(self, proxy: str | None) -> "AccountGeneratorBuilder":
        """HTTP proxy URL for both services. Passed through as-is."""
        return replace(self, config=replace(self.config, proxy=proxy))

    def timeout(self, timeout_sec: float) -> "AccountGeneratorBuilder":
        return replace(self, config=replace(self.config, timeout_sec=timeout_sec))

    def poll_interval(self, poll_interval_sec: float) -> "AccountGeneratorBuilder":
        return replace(self, config=replace(self.config, poll_interval_sec=poll_interval_sec))

    def service_domain(self, domain: str) -> "AccountGeneratorBuilder":
        return replace(self, config=replace(self.config, service_domain=domain))

    def email_provider(self, mail: EmailProvider) -> "AccountGeneratorBuilder":
        return replace(self, mail=mail)

    def account_service(self, accounts: AccountService) -> "AccountGeneratorBuilder":
        return replace(self, accounts=accounts)

    def build(self) -> AccountGenerator:
        """Connect the mail client (unless one was supplied) and return a ready generator.

        Raises `MailError` if the mail API cannot be reached.
        """
        if self.accounts is None:
            raise ValueError("An account service is required: call .account_service(...) before build()")
        mail = self.mail
        if mail is None:
            client = GuerrillaMailHttpClient(base_url=self.config.mail_base_url, proxy_url=self.config.proxy)
            client.connect()
            mail = client
        logger.debug(
            f"[gen] Generator ready: timeout={self.config.timeout_sec:g}s "
            f"poll={self.config.poll_interval_sec:g}s proxy={'on' if self.config.proxy else 'off'}"
        )
        return AccountGenerator(mail=mail, accounts=self.accounts, config=self.config)
