"""
Tests for the report aggregators.
"""

from datetime import date
from decimal import Decimal

import pytest

from conftest import make_item_input, make_transaction_input
from models import TransactionCategory, TransactionType
from schemas import CategoryBreakdownInput, FinancialReportInput, InventoryReportInput
from services.inventory import create_inventory_item
from services.reports import get_category_breakdown, get_financial_summary, get_inventory_summary
from services.transactions import create_transaction

pytestmark = pytest.mark.usefixtures('app_ctx')

JANUARY = FinancialReportInput(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))


def _income(day, amount, **kw):
    return create_transaction(make_transaction_input(date=day, amount=Decimal(amount), type=TransactionType.INCOME, **kw))


def _expense(day, amount, category=TransactionCategory.RENT, **kw):
    return create_transaction(make_transaction_input(
        date=day, amount=Decimal(amount), type=TransactionType.EXPENSE, category=category, **kw))


class TestFinancialSummary:
    def test_totals_within_period(self):
        _income(date(2024, 1, 5), '2000.00')
        _expense(date(2024, 1, 10), '800.00')
        _income(date(2024, 2, 1), '999.00')
        summary = get_financial_summary(JANUARY)
        assert summary['totalIncome'] == 2000.0
        assert summary['totalExpenses'] == 800.0
        assert summary['netProfit'] == 1200.0
        assert summary['period'] == {'startDate': '2024-01-01', 'endDate': '2024-01-31'}

    def test_no_transactions_gives_zeros(self):
        summary = get_financial_summary(JANUARY)
        assert (summary['totalIncome'], summary['totalExpenses'], summary['netProfit']) == (0, 0, 0)

    def test_boundaries_inclusive(self):
        _income(date(2024, 1, 1), '10.00')
        _income(date(2024, 1, 31), '5.00')
        _expense(date(2023, 12, 31), '99.00')
        summary = get_financial_summary(JANUARY)
        assert summary['totalIncome'] == 15.0
        assert summary['totalExpenses'] == 0

    def test_single_day_range(self):
        _income(date(2024, 1, 5), '10.00')
        _income(date(2024, 1, 6), '20.00')
        day = FinancialReportInput(start_date=date(2024, 1, 5), end_date=date(2024, 1, 5))
        assert get_financial_summary(day)['totalIncome'] == 10.0

    def test_inverted_range_is_empty(self):
        _income(date(2024, 1, 5), '10.00')
        inverted = FinancialReportInput(start_date=date(2024, 1, 31), end_date=date(2024, 1, 1))
        assert get_financial_summary(inverted)['totalIncome'] == 0

    def test_net_loss(self):
        _income(date(2024, 1, 2), '100.10')
        _expense(date(2024, 1, 3), '250.20')
        assert get_financial_summary(JANUARY)['netProfit'] == -150.1

    def test_cents_do_not_drift(self):
        for _ in range(10):
            _income(date(2024, 1, 15), '0.10')
        assert get_financial_summary(JANUARY)['totalIncome'] == 1.0


class TestInventorySummary:
    def test_totals_and_low_stock(self):
        create_inventory_item(make_item_input(item_name='Widget', sku='W-1', quantity=20, unit_cost=Decimal('15.50')))
        create_inventory_item(make_item_input(item_name='Gadget', sku='G-1', quantity=5, unit_cost=Decimal('10.00')))
        summary = get_inventory_summary(InventoryReportInput(low_stock_threshold=10))
        assert summary['totalItems'] == 2
        assert summary['totalValue'] == 360.0
        assert [item['sku'] for item in summary['lowStockItems']] == ['G-1']
        assert summary['lowStockThreshold'] == 10
        assert summary['totalQuantity'] == 25
        assert summary['potentialRevenue'] == 625.0

    def test_threshold_inclusive_and_zero_qualifies(self):
        create_inventory_item(make_item_input(item_name='A', sku='A', quantity=10))
        create_inventory_item(make_item_input(item_name='B', sku='B', quantity=0))
        create_inventory_item(make_item_input(item_name='C', sku='C', quantity=11))
        summary = get_inventory_summary(InventoryReportInput(low_stock_threshold=10))
        assert [item['sku'] for item in summary['lowStockItems']] == ['A', 'B']

    def test_empty_inventory(self):
        summary = get_inventory_summary(InventoryReportInput())
        assert summary == {
            'totalItems': 0,
            'totalValue': 0.0,
            'lowStockItems': [],
            'lowStockThreshold': 10,
            'totalQuantity': 0,
            'potentialRevenue': 0.0,
        }

    def test_repeatable_with_different_thresholds(self):
        create_inventory_item(make_item_input(quantity=5))
        assert len(get_inventory_summary(InventoryReportInput(low_stock_threshold=4))['lowStockItems']) == 0
        assert len(get_inventory_summary(InventoryReportInput(low_stock_threshold=5))['lowStockItems']) == 1


class TestCategoryBreakdown:
    def test_expense_totals_largest_first(self):
        _expense(date(2024, 1, 3), '100.00', category=TransactionCategory.UTILITIES)
        _expense(date(2024, 1, 4), '1200.00', category=TransactionCategory.RENT)
        _expense(date(2024, 1, 9), '50.25', category=TransactionCategory.UTILITIES)
        _income(date(2024, 1, 9), '5000.00')
        _expense(date(2024, 2, 1), '999.00', category=TransactionCategory.TRAVEL)
        rows = get_category_breakdown(CategoryBreakdownInput(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)))
        assert rows == [
            {'category': 'Rent', 'amount': 1200.0},
            {'category': 'Utilities', 'amount': 150.25},
        ]

    def test_income_breakdown(self):
        _income(date(2024, 1, 9), '5000.00')
        rows = get_category_breakdown(CategoryBreakdownInput(
            start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), type=TransactionType.INCOME))
        assert rows == [{'category': 'Sales', 'amount': 5000.0}]

    def test_nothing_in_range(self):
        assert get_category_breakdown(CategoryBreakdownInput(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))) == []
