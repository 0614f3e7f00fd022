from __future__ import annotations

import argparse
from pathlib import Path
import sys
import time

from loguru import logger

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from megagen.account import append_account
from megagen.config import load_account_service_ref, load_generator_config
from megagen.errors import GenerationError
from megagen.logging_setup import setup_logging
from megagen.registration.account_service import load_account_service
from megagen.registration.generator import AccountGeneratorBuilder


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    cfg = load_generator_config()
    ap = argparse.ArgumentParser(description="Create MEGA accounts confirmed through a temporary GuerrillaMail inbox")
    ap.add_argument("-p", "--password", required=True, help="Password for the new account(s)")
    ap.add_argument("-n", "--name", type=str, default=None, help="Account name (random if not specified)")
    ap.add_argument("-c", "--count", type=int, default=1, help="Number of accounts to generate")
    ap.add_argument("-o", "--output", type=str, default=None, help="File to append credentials to")
    ap.add_argument("--proxy", type=str, default=cfg.proxy, help="HTTP proxy URL for both services")
    ap.add_argument("--timeout", type=float, default=cfg.timeout_sec, help="Seconds to wait for the confirmation email")
    ap.add_argument("--poll-interval", type=float, default=cfg.poll_interval_sec, help="Seconds between inbox checks")
    ap.add_argument("--delay", type=float, default=30.0, help="Seconds to wait between accounts")
    ap.add_argument(
        "--account-service",
        type=str,
        default=load_account_service_ref(),
        help="Account service implementation as package.module:attribute (env MEGAGEN_ACCOUNT_SERVICE)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug output on the console")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    if not args.account_service:
        logger.error("No account service configured: pass --account-service or set MEGAGEN_ACCOUNT_SERVICE")
        return 1

    builder = (
        AccountGeneratorBuilder.from_config(load_generator_config())
        .timeout(args.timeout)
        .poll_interval(args.poll_interval)
    )
    if args.proxy:
        builder = builder.proxy(args.proxy)
    try:
        accounts = load_account_service(args.account_service)
    except (ImportError, AttributeError, ValueError) as exc:
        logger.error(f"Cannot load account service {args.account_service!r}: {exc}")
        return 1
    try:
        generator = builder.account_service(accounts).build()
    except (GenerationError, ValueError) as exc:
        logger.error(f"Failed to initialize: {exc}")
        return 1

    created = 0
    for i in range(1, args.count + 1):
        if args.count > 1:
            logger.info(f"Generating account {i}/{args.count}...")
        try:
            account = generator.generate(args.password, args.name)
        except GenerationError as exc:
            logger.warning(f"Failed to generate account: {type(exc).__name__}: {exc}")
        else:
            created += 1
            logger.info(f"Account created: {account.email} ({account.name})")
            print(account)
            if args.output:
                try:
                    append_account(args.output, account)
                    logger.info(f"Saved to {args.output}")
                except OSError as exc:
                    logger.warning(f"Failed to save to file: {exc}")

        if i < args.count:
            logger.info(f"Waiting {args.delay:g}s before next account...")
            time.sleep(args.delay)

    logger.info(f"Summary: {created}/{args.count} accounts created successfully")
    return 0 if created else 1


if __name__ == "__main__":
    raise SystemExit(main())
