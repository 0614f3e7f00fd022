from __future__ import annotations

import argparse
from pathlib import Path
import sys
import time

from bs4 import BeautifulSoup
from loguru import logger

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from megagen.config import load_generator_config
from megagen.errors import MailError
from megagen.logging_setup import setup_logging
from megagen.registration.guerrillamail_http import GuerrillaMailHttpClient
from megagen.registration.utils import extract_confirm_key, is_likely_confirmation


def parse_args() -> argparse.Namespace:
    cfg = load_generator_config()
    ap = argparse.ArgumentParser(description="Open a GuerrillaMail address and dump its last email as text")
    ap.add_argument("--alias", required=True, help="Local part of the address to open")
    ap.add_argument("--wait", type=float, default=0.0, help="Keep polling this many seconds until a message arrives")
    ap.add_argument("--base-url", type=str, default=cfg.mail_base_url, help="API base URL")
    ap.add_argument("--proxy", type=str, default=cfg.proxy or "", help="Proxy URL for GuerrillaMail API")
    ap.add_argument("--keep", action="store_true", help="Do not forget the address afterwards")
    return ap.parse_args()


def html_to_text(raw: str) -> str:
    return BeautifulSoup(raw, "html.parser").get_text("\n", strip=True)


def main() -> int:
    setup_logging()
    args = parse_args()
    cfg = load_generator_config()
    client = GuerrillaMailHttpClient(base_url=args.base_url, proxy_url=(args.proxy or None))
    try:
        address = client.create_address(args.alias)
    except MailError as exc:
        logger.error(f"Create failed: {exc}")
        return 1

    try:
        deadline = time.monotonic() + args.wait
        messages = client.list_messages(address)
        while not messages and time.monotonic() < deadline:
            time.sleep(3.0)
            messages = client.list_messages(address)
        if not messages:
            logger.warning(f"Inbox {address} is empty")
            return 1

        last = messages[-1]
        details = client.fetch_message(address, last.id)
        logger.info(f"Subject: {last.subject}")
        logger.info(f"From: {last.sender}")
        logger.info(f"Likely confirmation: {is_likely_confirmation(last)}")
        key = extract_confirm_key(details.body, domain=cfg.service_domain)
        if key:
            logger.info(f"Confirmation key: {key}")
        print("\n===== TEXT =====\n")
        print(html_to_text(details.body) or "<empty body>")
        return 0
    except MailError as exc:
        logger.error(f"Fetch failed: {exc}")
        return 1
    finally:
        if not args.keep:
            try:
                client.delete_address(address)
            except MailError as exc:
                logger.debug(f"Forget failed: {exc}")


if __name__ == "__main__":
    raise SystemExit(main())
