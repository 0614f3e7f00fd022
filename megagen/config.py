from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


DEFAULT_TIMEOUT_SEC = 300.0
DEFAULT_POLL_INTERVAL_SEC = 5.0
DEFAULT_SERVICE_DOMAIN = "mega.nz"
DEFAULT_MAIL_BASE_URL = "https://api.guerrillamail.com/ajax.php"


@dataclass(frozen=True)
class GeneratorConfig:
    """Configuration for one account generator instance.

    - `timeout_sec`: How long to wait for the confirmation email.
    - `poll_interval_sec`: Pause between inbox checks.
    - `proxy`: Proxy URL forwarded unchanged to the mail and account services.
    - `service_domain`: Domain the confirmation links point to.
    - `mail_base_url`: GuerrillaMail API endpoint.
    """
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    poll_interval_sec: float = DEFAULT_POLL_INTERVAL_SEC
    proxy: str | None = None
    service_domain: str = DEFAULT_SERVICE_DOMAIN
    mail_base_url: str = DEFAULT_MAIL_BASE_URL


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from exc


def load_generator_config() -> GeneratorConfig:
    load_dotenv(override=False)

    # Empty values fall back to the defaults
    proxy = os.getenv("MEGAGEN_PROXY", "").strip() or None
    return GeneratorConfig(
        timeout_sec=_env_float("MEGAGEN_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC),
        poll_interval_sec=_env_float("MEGAGEN_POLL_INTERVAL_SEC", DEFAULT_POLL_INTERVAL_SEC),
        proxy=proxy,
        service_domain=os.getenv("MEGAGEN_SERVICE_DOMAIN", "").strip() or DEFAULT_SERVICE_DOMAIN,
        mail_base_url=os.getenv("MEGAGEN_MAIL_BASE_URL", "").strip() or DEFAULT_MAIL_BASE_URL,
    )


def load_account_service_ref() -> str | None:
    """`module:attribute` reference of the account service implementation, if configured."""
    load_dotenv(override=False)
    return os.getenv("MEGAGEN_ACCOUNT_SERVICE", "").strip() or None
