"""Shared test fixtures and configuration."""

from email.message import EmailMessage

import pytest

from sender_identity.config import Config, get_config
from sender_identity.identities import Identity
from sender_identity.patterns import reset_pattern_cache


@pytest.fixture(autouse=True)
def isolate_global_state():
    """Reset the pattern cache and config cache around every test."""
    reset_pattern_cache()
    get_config.cache_clear()
    yield
    reset_pattern_cache()
    get_config.cache_clear()


@pytest.fixture
def test_config() -> Config:
    """Default configuration, independent of the environment."""
    return Config()


@pytest.fixture
def personal() -> Identity:
    """Identity with only an exact email."""
    return Identity(email="me@personal.com", name="Personal", identity_id="1")


@pytest.fixture
def work() -> Identity:
    """Identity with an exact email and a catch-all for its domain."""
    return Identity(email="me@work.com", catch_all="*@work.com", name="Work", identity_id="2")


@pytest.fixture
def shop() -> Identity:
    """Catch-all-only identity."""
    return Identity(catch_all="*@shop.example", name="Shop", identity_id="3")


@pytest.fixture
def make_message():
    """Build an EmailMessage from (header, value) pairs, keeping repeats."""

    def _make(*headers: tuple[str, str]) -> EmailMessage:
        msg = EmailMessage()
        for name, value in headers:
            msg[name] = value
        return msg

    return _make
