import pytest
import structlog
from shared.logging import add_context, clear_context, get_log_level


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    "env, level",
    [("production", "INFO"), ("staging", "INFO"), ("development", "DEBUG"), ("test", "WARNING"), ("qa", "INFO")],
)
def test_log_level_by_environment(monkeypatch, env, level):
    monkeypatch.setenv("PROTEAN_ENV", env)
    assert get_log_level() == level


def test_log_level_override(monkeypatch):
    monkeypatch.setenv("PROTEAN_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert get_log_level() == "ERROR"


def test_default_is_development():
    assert get_log_level() == "DEBUG"


def test_context_binding():
    clear_context()
    add_context(checkout_id="gid://shopify/Checkout/abc", payment_id="pay_1")
    assert structlog.contextvars.get_contextvars() == {
        "checkout_id": "gid://shopify/Checkout/abc",
        "payment_id": "pay_1",
    }
    clear_context()
    assert structlog.contextvars.get_contextvars() == {}
