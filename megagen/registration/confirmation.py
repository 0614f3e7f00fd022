from __future__ import annotations

import threading
import time
from typing import Callable

from loguru import logger

from ..config import DEFAULT_SERVICE_DOMAIN
from ..errors import EmailTimeout, GenerationCancelled, MailError, NoConfirmationLink
from .email_provider import EmailProvider
from .utils import extract_confirm_key, is_likely_confirmation


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise GenerationCancelled()


def _pause(seconds: float, cancel: threading.Event | None, sleep: Callable[[float], None]) -> None:
    if cancel is None:
        sleep(seconds)
        return
    if cancel.wait(seconds):
        raise GenerationCancelled()


def wait_for_confirmation(
    provider: EmailProvider,
    address: str,
    timeout_sec: float,
    poll_interval_sec: float,
    domain: str = DEFAULT_SERVICE_DOMAIN,
    cancel: threading.Event | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Poll `address` until a likely confirmation email yields a key.

    The deadline is checked before each inbox fetch, so the total wait can exceed
    `timeout_sec` by one fetch plus one `poll_interval_sec` pause.

    Raises `EmailTimeout` when no likely email was ever seen, `NoConfirmationLink` when
    one was seen but held no key, and `MailError` as soon as any inbox request fails.
    """
    start = clock()
    saw_target = False
    polls = 0
    while True:
        if clock() - start >= timeout_sec:
            if saw_target:
                logger.warning(f"[confirm] Likely email seen but no key found for {address}")
                raise NoConfirmationLink()
            logger.warning(f"[confirm] No confirmation email for {address} after {timeout_sec:g}s")
            raise EmailTimeout()

        _check_cancel(cancel)
        polls += 1
        try:
            messages = provider.list_messages(address)
        except MailError:
            raise
        except Exception as exc:
            raise MailError(f"list_messages: {type(exc).__name__}: {exc}") from exc
        logger.debug(f"[confirm] Poll #{polls}: {len(messages)} message(s) in {address}")

        for msg in messages:
            if not is_likely_confirmation(msg):
                continue
            saw_target = True
            _check_cancel(cancel)
            try:
                details = provider.fetch_message(address, msg.id)
            except MailError:
                raise
            except Exception as exc:
                raise MailError(f"fetch_message: {type(exc).__name__}: {exc}") from exc
            key = extract_confirm_key(details.body, domain=domain)
            if key:
                logger.info(f"[confirm] Key found in message {msg.id} ({msg.subject!r})")
                return key
            logger.debug(f"[confirm] Message {msg.id} from {msg.sender!r} has no confirmation link")

        _pause(poll_interval_sec, cancel, sleep)
