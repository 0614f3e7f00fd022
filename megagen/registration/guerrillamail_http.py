from __future__ import annotations

import threading
from http.cookiejar import DefaultCookiePolicy
from typing import Any

import requests
from loguru import logger

from ..config import DEFAULT_MAIL_BASE_URL
from ..errors import MailError
from .email_provider import InboxMessage, MessageDetails


class GuerrillaMailHttpClient:
    """Thin HTTP client for the GuerrillaMail JSON API.

    Every created address gets its own API session (`sid_token`); the address → session
    table is guarded by a lock so one client can serve concurrent generation attempts.
    """

    def __init__(
        self,
        base_url: str | None = None,
        proxy_url: str | None = None,
        lang: str = "en",
        timeout: tuple[float, float] = (10, 20),
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url or DEFAULT_MAIL_BASE_URL
        self.lang = lang
        self.timeout = timeout
        self._session = session or requests.Session()
        # Avoid system proxies; sessions are passed explicitly, never kept as cookies
        self._session.trust_env = False
        self._session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        if proxy_url:
            self._session.proxies = {"http": proxy_url, "https": proxy_url}
        self._sids: dict[str, str] = {}
        self._lock = threading.Lock()

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "megagen/0.1 (+https://local)",
            "Connection": "keep-alive",
        }

    def _call(self, func: str, sid_token: str | None = None, **params: Any) -> dict[str, Any]:
        query: dict[str, Any] = {"f": func, "ip": "127.0.0.1", "agent": "megagen"}
        query.update(params)
        cookies = None
        if sid_token:
            query["sid_token"] = sid_token
            cookies = {"PHPSESSID": sid_token}
        logger.debug(f"[mail] GET {self.base_url} f={func}")
        try:
            resp = self._session.get(
                self.base_url,
                headers=self._headers(),
                params=query,
                cookies=cookies,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise MailError(f"{func}: {type(exc).__name__}: {exc}") from exc
        if resp.status_code != 200:
            raise MailError(f"{func}: HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise MailError(f"{func}: invalid JSON: {resp.text[:200]}") from exc
        if not isinstance(data, dict):
            raise MailError(f"{func}: unexpected payload: {str(data)[:200]}")
        return data

    def _sid_for(self, address: str) -> str:
        with self._lock:
            sid = self._sids.get(address)
        if sid is None:
            raise MailError(f"Unknown address (not created by this client): {address}")
        return sid

    def connect(self) -> None:
        """Check that the API answers by opening (and discarding) a session."""
        data = self._call("get_email_address", lang=self.lang)
        if not data.get("sid_token"):
            raise MailError(f"get_email_address: no sid_token in response: {str(data)[:200]}")
        logger.debug("[mail] GuerrillaMail API reachable")

    def create_address(self, alias: str) -> str:
        data = self._call("get_email_address", lang=self.lang)
        sid = data.get("sid_token")
        if not sid:
            raise MailError(f"get_email_address: no sid_token in response: {str(data)[:200]}")
        data = self._call("set_email_user", sid_token=sid, email_user=alias, lang=self.lang)
        address = data.get("email_addr")
        if not isinstance(address, str) or "@" not in address:
            raise MailError(f"set_email_user: no email_addr in response: {str(data)[:200]}")
        # set_email_user may rotate the session token
        sid = data.get("sid_token") or sid
        with self._lock:
            self._sids[address] = sid
        logger.info(f"[mail] Created {address}")
        return address

    def list_messages(self, address: str) -> list[InboxMessage]:
        data = self._call("get_email_list", sid_token=self._sid_for(address), offset=0)
        items = data.get("list") or []
        messages: list[InboxMessage] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            messages.append(
                InboxMessage(
                    id=str(item.get("mail_id", "")),
                    sender=str(item.get("mail_from") or ""),
                    subject=str(item.get("mail_subject") or ""),
                )
            )
        return messages

    def fetch_message(self, address: str, message_id: str) -> MessageDetails:
        data = self._call("fetch_email", sid_token=self._sid_for(address), email_id=message_id)
        body = data.get("mail_body")
        if body is None:
            raise MailError(f"fetch_email: no mail_body for message {message_id}")
        return MessageDetails(body=str(body))

    def delete_address(self, address: str) -> None:
        with self._lock:
            sid = self._sids.pop(address, None)
        if sid is None:
            raise MailError(f"Unknown address (not created by this client): {address}")
        self._call("forget_me", sid_token=sid, email_addr=address)
        logger.debug(f"[mail] Forgot {address}")
