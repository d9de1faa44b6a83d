"""
Pytest fixtures for the bookkeeping service.

Every test gets a fresh application bound to an in-memory SQLite database.
"""

from datetime import date
from decimal import Decimal

import pytest

from app import create_app
from models import TransactionCategory, TransactionType
from schemas import InventoryItemInput, TransactionInput


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'LOG_LEVEL': 'DEBUG',
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


def make_transaction_input(**overrides) -> TransactionInput:
    defaults = dict(
        date=date(2024, 1, 5),
        description='Invoice #1001',
        amount=Decimal('2000.00'),
        type=TransactionType.INCOME,
        category=TransactionCategory.SALES,
    )
    defaults.update(overrides)
    return TransactionInput(**defaults)


def make_item_input(**overrides) -> InventoryItemInput:
    defaults = dict(
        item_name='Widget',
        sku='WID-001',
        quantity=20,
        unit_cost=Decimal('15.50'),
        selling_price=Decimal('25.00'),
    )
    defaults.update(overrides)
    return InventoryItemInput(**defaults)
