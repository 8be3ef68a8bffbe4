"""Shared fixtures for the buyer example tests."""

import pytest

from core.buyer_client import MockBuyerClient
from core.buyer_manager import AdExchangeBuyerManager
from core.config import get_settings
from core.dates import CalendarDate


@pytest.fixture
def today():
    """Fixed reference day."""
    return CalendarDate(2024, 1, 15)


@pytest.fixture
def mock_client():
    """In-memory buyer client."""
    return MockBuyerClient()


@pytest.fixture
def manager(mock_client):
    """Manager over the in-memory client, retrying without delay."""
    return AdExchangeBuyerManager(
        mock_client,
        max_attempts=3,
        retry_initial=0,
        retry_max=0,
        use_mock=True,
    )


@pytest.fixture
def dev_settings(monkeypatch, tmp_path):
    """Development settings with a generated JWT key pair."""
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("JWT_JWKS_PUBLIC_PATH", str(tmp_path / "missing-public.json"))
    monkeypatch.setenv("JWT_JWKS_PRIVATE_PATH", str(tmp_path / "missing-private.json"))
    monkeypatch.setenv("BUYER_API_RETRY_INITIAL", "0")
    monkeypatch.setenv("BUYER_API_RETRY_MAX", "0")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
