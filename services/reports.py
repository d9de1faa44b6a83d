from decimal import Decimal

import pandas as pd

from models import Transaction, TransactionType, to_cents
from services.inventory import list_inventory_items


def _transactions_between(start, end, ttype=None):
    q = Transaction.query.filter(Transaction.date >= start, Transaction.date <= end)
    if ttype is not None:
        q = q.filter(Transaction.type == ttype)
    return q.all()


def get_financial_summary(params):
    """Income, expenses and net profit for transactions dated within [start, end]."""
    income = Decimal('0')
    expenses = Decimal('0')
    for tx in _transactions_between(params.start_date, params.end_date):
        if tx.type is TransactionType.INCOME:
            income += tx.amount
        else:
            expenses += tx.amount
    return {
        'totalIncome': float(income),
        'totalExpenses': float(expenses),
        'netProfit': float(income - expenses),
        'period': {
            'startDate': params.start_date.isoformat(),
            'endDate': params.end_date.isoformat(),
        },
    }


def get_inventory_summary(params):
    threshold = params.low_stock_threshold
    items = list_inventory_items()
    total_value = sum((item.total_value for item in items), Decimal('0'))
    potential_revenue = sum((item.quantity * item.selling_price for item in items), Decimal('0'))
    return {
        'totalItems': len(items),
        'totalValue': float(to_cents(total_value)),
        'lowStockItems': [item.to_dict() for item in items if item.quantity <= threshold],
        'lowStockThreshold': threshold,
        'totalQuantity': sum(item.quantity for item in items),
        'potentialRevenue': float(to_cents(potential_revenue)),
    }


def get_category_breakdown(params):
    """Per-category totals of one transaction type, largest first."""
    rows = _transactions_between(params.start_date, params.end_date, params.type)
    if not rows:
        return []
    # group in integer cents so the sums stay exact
    df = pd.DataFrame([{
        'category': r.category.value,
        'cents': int(r.amount * 100),
    } for r in rows])
    totals = df.groupby('category')['cents'].sum().reset_index()
    totals = totals[totals['cents'] > 0].sort_values(['cents', 'category'], ascending=[False, True])
    return [{'category': row.category, 'amount': float(Decimal(int(row.cents)) / 100)}
            for row in totals.itertuples(index=False)]
