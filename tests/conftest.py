"""Shared fixtures for hubprint tests."""

from datetime import datetime

import pytest

from hubprint.printing.receipt import ReceiptData
from hubprint.settings import Settings

from fakes import FakeCapabilities


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def capabilities() -> FakeCapabilities:
    return FakeCapabilities()


@pytest.fixture
def receipt() -> ReceiptData:
    return ReceiptData(
        store_name="Sunny Side Up",
        address="12 Mango St",
        session_id="a1b2c3d4e5f6",
        customer_name="Ana Cruz",
        table_id="T-07",
        start_time=datetime(2024, 3, 1, 14, 0, 0),
        end_time=datetime(2024, 3, 1, 16, 0, 0),
        hours=2,
        rate=50,
        total_amount=100,
        payment_method="GCash",
        package="2-Hour Pass",
    )
