from __future__ import annotations

import random
import re
import string
from functools import lru_cache
from typing import Pattern

from ..config import DEFAULT_SERVICE_DOMAIN
from .email_provider import InboxMessage


_FIRST_NAMES = (
    "Alex", "Sam", "Jordan", "Taylor", "Morgan", "Casey", "Jamie", "Robin", "Avery", "Riley",
    "Quinn", "Charlie", "Drew", "Elliot", "Hayden", "Kai", "Logan", "Noel", "Parker", "Reese",
)
_LAST_NAMES = (
    "Smith", "Johnson", "Brown", "Miller", "Davis", "Wilson", "Moore", "Clark", "Lewis", "Walker",
    "Hall", "Young", "King", "Wright", "Green", "Baker", "Adams", "Nelson", "Carter", "Turner",
)

# Token charset of plain-text confirmation links
_KEY_CHARS = r"[a-zA-Z0-9_-]+"


def generate_random_alias(length: int = 12) -> str:
    """Local part for a new disposable address: a letter followed by lowercase letters/digits."""
    chars = string.ascii_lowercase + string.digits
    head = random.choice(string.ascii_lowercase)
    return head + "".join(random.choice(chars) for _ in range(max(1, length) - 1))


def generate_random_name() -> str:
    return f"{random.choice(_FIRST_NAMES)} {random.choice(_LAST_NAMES)}"


def is_likely_confirmation(msg: InboxMessage) -> bool:
    # Case differs per field on purpose: matches what real confirmation mails look like
    return "mega" in (msg.sender or "") or "MEGA" in (msg.subject or "")


@lru_cache(maxsize=8)
def _confirm_patterns(domain: str) -> tuple[tuple[str, Pattern[str]], ...]:
    base = re.escape(f"https://{domain}/")
    return (
        ("fragment", re.compile(base + r"#confirm(" + _KEY_CHARS + ")")),
        ("path", re.compile(base + r"confirm(" + _KEY_CHARS + ")")),
        ("href-fragment", re.compile(r'href="' + base + r'#confirm([^"]+)"')),
        ("href-path", re.compile(r'href="' + base + r'confirm([^"]+)"')),
    )


def extract_confirm_key(body: str, domain: str = DEFAULT_SERVICE_DOMAIN) -> str | None:
    """Return the confirmation key of the first link form found in `body`.

    Forms are tried in a fixed order (`#confirm` link, `/confirm` link, then the quoted
    `href` variants), so an earlier form wins even if a later one matches elsewhere.
    """
    for _kind, pattern in _confirm_patterns(domain):
        m = pattern.search(body or "")
        if m:
            return m.group(1)
    return None
