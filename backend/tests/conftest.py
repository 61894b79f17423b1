"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.helpers import get_price_service
from database import Base, get_db
from main import app
from services.price_service import PriceService
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    USER_ID,
    aapl,
    btc,
    eth,
    manual_asset,
    vwce,
    wallet,
)
from tests.fixtures.mocks import MockQuoteProvider


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="crypto_provider")
def crypto_provider_fixture():
    return MockQuoteProvider("coingecko", {"bitcoin": 150, "ethereum": 2000})


@pytest.fixture(name="equity_provider")
def equity_provider_fixture():
    return MockQuoteProvider("twelvedata", {"AAPL": 200, "VWCE": 100})


@pytest.fixture(name="price_service")
def price_service_fixture(crypto_provider, equity_provider):
    """PriceService backed by mock providers, cache disabled."""
    return PriceService(
        crypto_provider=crypto_provider,
        equity_provider=equity_provider,
        cache_ttl_seconds=0,
    )


@pytest.fixture(name="client")
def client_fixture(db, price_service):
    """Create a test client with the test database, acting as USER_ID."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_service] = lambda: price_service
    client = TestClient(app, headers={"X-User-Id": USER_ID})
    yield client
    app.dependency_overrides.clear()
