from __future__ import annotations

import pytest

from megagen import config as config_mod
from megagen.account import GeneratedAccount, append_account
from megagen.config import GeneratorConfig, load_account_service_ref, load_generator_config
from megagen.registration.account_service import load_account_service


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    monkeypatch.setattr(config_mod, "load_dotenv", lambda override=False: None)
    for name in (
        "MEGAGEN_TIMEOUT_SEC",
        "MEGAGEN_POLL_INTERVAL_SEC",
        "MEGAGEN_PROXY",
        "MEGAGEN_SERVICE_DOMAIN",
        "MEGAGEN_MAIL_BASE_URL",
        "MEGAGEN_ACCOUNT_SERVICE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert load_generator_config() == GeneratorConfig()
    assert load_account_service_ref() is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MEGAGEN_TIMEOUT_SEC", "120")
    monkeypatch.setenv("MEGAGEN_POLL_INTERVAL_SEC", "2.5")
    monkeypatch.setenv("MEGAGEN_PROXY", "http://127.0.0.1:8080")
    monkeypatch.setenv("MEGAGEN_ACCOUNT_SERVICE", "pkg.mod:Service")
    cfg = load_generator_config()
    assert cfg.timeout_sec == 120
    assert cfg.poll_interval_sec == 2.5
    assert cfg.proxy == "http://127.0.0.1:8080"
    assert load_account_service_ref() == "pkg.mod:Service"


def test_bad_number(monkeypatch):
    monkeypatch.setenv("MEGAGEN_TIMEOUT_SEC", "five minutes")
    with pytest.raises(ValueError):
        load_generator_config()


def test_account_str_block():
    account = GeneratedAccount(email="a@b.c", password="pw", name="Sam Hall")
    assert str(account) == "Email: a@b.c\nPassword: pw\nName: Sam Hall"


def test_append_account_appends_blocks(tmp_path):
    out = tmp_path / "out" / "accounts.txt"
    append_account(out, GeneratedAccount(email="a@b.c", password="pw", name="One"))
    append_account(out, GeneratedAccount(email="d@e.f", password="pw", name="Two"))
    assert out.read_text(encoding="utf-8") == (
        "---\nEmail: a@b.c\nPassword: pw\nName: One\n\n"
        "---\nEmail: d@e.f\nPassword: pw\nName: Two\n\n"
    )


class _Service:
    def register(self, email, password, name, proxy=None):
        return email

    def verify(self, state, token, proxy=None):
        return None


_instance = _Service()


def test_load_account_service_instantiates_class():
    svc = load_account_service(f"{__name__}:_Service")
    assert isinstance(svc, _Service)


def test_load_account_service_uses_instance():
    assert load_account_service(f"{__name__}:_instance") is _instance


@pytest.mark.parametrize("ref", ["", "module_only", ":attr", "mod:"])
def test_load_account_service_rejects_bad_reference(ref):
    with pytest.raises(ValueError):
        load_account_service(ref)
