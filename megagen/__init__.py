"""Create and confirm accounts using a temporary GuerrillaMail inbox.

Typical use::

    generator = (
        AccountGenerator.builder()
        .account_service(my_service)
        .timeout(180)
        .poll_interval(3)
        .build()
    )
    account = generator.generate_with_name("S3cure-Password!", "Automation Bot")
"""

from .account import GeneratedAccount, append_account
from .config import GeneratorConfig, load_generator_config
from .errors import (
    AccountServiceError,
    EmailTimeout,
    GenerationCancelled,
    GenerationError,
    MailError,
    NoConfirmationLink,
)
from .registration.generator import AccountGenerator, AccountGeneratorBuilder

__all__ = [
    "AccountGenerator",
    "AccountGeneratorBuilder",
    "AccountServiceError",
    "EmailTimeout",
    "GeneratedAccount",
    "GenerationCancelled",
    "GenerationError",
    "GeneratorConfig",
    "MailError",
    "NoConfirmationLink",
    "append_account",
    "load_generator_config",
]
