from __future__ import annotations

"""Registration package: disposable inbox + account service orchestration.

Submodules:
 - email_provider: Common interfaces and models for disposable inbox providers
 - guerrillamail_http: GuerrillaMail HTTP client implementing the email provider
 - account_service: Account service interface and loader for pluggable implementations
 - utils: Random alias/name suppliers, confirmation email heuristics and key extraction
 - confirmation: Deadline-bounded inbox polling for the confirmation key
 - generator: End-to-end generation workflow and its builder
"""

__all__ = [
    "account_service",
    "confirmation",
    "email_provider",
    "generator",
    "guerrillamail_http",
    "utils",
]
