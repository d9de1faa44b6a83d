
import enum
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.types import TypeDecorator

db = SQLAlchemy()

CENTS = Decimal('0.01')


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_cents(value):
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class TransactionType(str, enum.Enum):
    INCOME = 'Income'
    EXPENSE = 'Expense'


class TransactionCategory(str, enum.Enum):
    SALES = 'Sales'
    RENT = 'Rent'
    UTILITIES = 'Utilities'
    PURCHASES = 'Purchases'
    SALARIES = 'Salaries'
    MARKETING = 'Marketing'
    EQUIPMENT = 'Equipment'
    INSURANCE = 'Insurance'
    OFFICE_SUPPLIES = 'Office Supplies'
    TRAVEL = 'Travel'
    OTHER = 'Other'


class FixedDecimal(TypeDecorator):
    """Decimal stored as fixed two-place text, so SQLite never sees a float."""

    impl = db.String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(to_cents(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Transaction(db.Model):
    __tablename__ = 'transactions'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    amount = db.Column(FixedDecimal, nullable=False)  # always positive
    type = db.Column(db.Enum(TransactionType, name='transaction_type', values_callable=_enum_values), nullable=False)
    category = db.Column(db.Enum(TransactionCategory, name='transaction_category', values_callable=_enum_values), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'description': self.description,
            'amount': float(self.amount),
            'type': self.type.value,
            'category': self.category.value,
            'created_at': self.created_at.isoformat(),
        }


class InventoryItem(db.Model):
    __tablename__ = 'inventory_items'

    id = db.Column(db.Integer, primary_key=True)
    item_name = db.Column(db.Text, nullable=False, index=True)
    sku = db.Column(db.String(120), unique=True, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_cost = db.Column(FixedDecimal, nullable=False)
    selling_price = db.Column(FixedDecimal, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def total_value(self):
        return self.quantity * self.unit_cost

    @property
    def profit_margin(self):
        # undefined for items that cost nothing
        if not self.unit_cost:
            return None
        return (self.selling_price - self.unit_cost) / self.unit_cost

    def to_dict(self):
        margin = self.profit_margin
        return {
            'id': self.id,
            'itemName': self.item_name,
            'sku': self.sku,
            'quantity': self.quantity,
            'unitCost': float(self.unit_cost),
            'sellingPrice': float(self.selling_price),
            'totalValue': float(self.total_value),
            'profitMargin': float(margin) if margin is not None else None,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }
