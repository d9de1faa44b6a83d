"""Request payload validation.

Every payload is checked here before any store access. Parsers return plain
dataclasses whose attribute names match the model columns, so handlers can
hand them straight to the ORM.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from errors import ValidationError
from models import TransactionCategory, TransactionType, to_cents

# largest values the store columns hold
MAX_DECIMAL = Decimal('99999999999.99')
MAX_INT = 2 ** 63 - 1


# ---------------------- Field parsers ----------------------
def parse_date(value, name):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if 'T' in text:
                return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
            return datetime.strptime(text, '%Y-%m-%d').date()
        except ValueError:
            pass
    raise ValidationError(f'{name} must be an ISO date (YYYY-MM-DD).')


def parse_text(value, name):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{name} is required.')
    return value.strip()


def parse_decimal(value, name, positive=False):
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f'{name} must be a number.')
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f'{name} must be a number.') from None
    if not number.is_finite():
        raise ValidationError(f'{name} must be a finite number.')
    if abs(number) > MAX_DECIMAL:
        raise ValidationError(f'{name} is out of range.')
    number = to_cents(number)
    if positive and number <= 0:
        raise ValidationError(f'{name} must be positive.')
    if number < 0:
        raise ValidationError(f'{name} must be non-negative.')
    return number


def parse_int(value, name, minimum=0, maximum=MAX_INT):
    if isinstance(value, bool):
        raise ValidationError(f'{name} must be an integer.')
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f'{name} must be an integer.') from None
    if not isinstance(value, int):
        raise ValidationError(f'{name} must be an integer.')
    if value < minimum:
        raise ValidationError(f'{name} must be at least {minimum}.')
    if value > maximum:
        raise ValidationError(f'{name} is out of range.')
    return value


def parse_choice(value, name, enum_cls):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(f'{name} must be one of: {allowed}.') from None


def _positive_decimal(value, name):
    return parse_decimal(value, name, positive=True)


def _non_negative_decimal(value, name):
    return parse_decimal(value, name)


def _transaction_type(value, name):
    return parse_choice(value, name, TransactionType)


def _transaction_category(value, name):
    return parse_choice(value, name, TransactionCategory)


# wire name -> (model attribute, parser)
TRANSACTION_FIELDS = {
    'date': ('date', parse_date),
    'description': ('description', parse_text),
    'amount': ('amount', _positive_decimal),
    'type': ('type', _transaction_type),
    'category': ('category', _transaction_category),
}

INVENTORY_ITEM_FIELDS = {
    'itemName': ('item_name', parse_text),
    'sku': ('sku', parse_text),
    'quantity': ('quantity', parse_int),
    'unitCost': ('unit_cost', _non_negative_decimal),
    'sellingPrice': ('selling_price', _positive_decimal),
}


# ---------------------- Inputs ----------------------
@dataclass(frozen=True)
class TransactionInput:
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category: TransactionCategory


@dataclass(frozen=True)
class InventoryItemInput:
    item_name: str
    sku: str
    quantity: int
    unit_cost: Decimal
    selling_price: Decimal


@dataclass(frozen=True)
class Patch:
    """Only the fields the caller actually sent, keyed by model attribute."""

    changes: dict = field(default_factory=dict)


@dataclass(frozen=True)
class FinancialReportInput:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class InventoryReportInput:
    low_stock_threshold: int = 10


@dataclass(frozen=True)
class CategoryBreakdownInput:
    start_date: date
    end_date: date
    type: TransactionType = TransactionType.EXPENSE


def _require_mapping(payload):
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object.')
    return payload


def _parse_fields(payload, field_map, partial=False):
    payload = _require_mapping(payload)
    if not partial:
        missing = [key for key in field_map if key not in payload]
        if missing:
            raise ValidationError(f'Missing required field(s): {", ".join(missing)}.')
    values = {}
    for key, (attr, parser) in field_map.items():
        if key in payload:
            values[attr] = parser(payload[key], key)
    return values


def parse_transaction_input(payload):
    return TransactionInput(**_parse_fields(payload, TRANSACTION_FIELDS))


def parse_transaction_patch(payload):
    return Patch(_parse_fields(payload, TRANSACTION_FIELDS, partial=True))


def parse_inventory_item_input(payload):
    return InventoryItemInput(**_parse_fields(payload, INVENTORY_ITEM_FIELDS))


def parse_inventory_item_patch(payload):
    return Patch(_parse_fields(payload, INVENTORY_ITEM_FIELDS, partial=True))


# ---------------------- Report inputs ----------------------
def _date_range(params):
    params = _require_mapping(params)
    for key in ('startDate', 'endDate'):
        if params.get(key) in (None, ''):
            raise ValidationError(f'{key} is required.')
    return parse_date(params['startDate'], 'startDate'), parse_date(params['endDate'], 'endDate')


def parse_financial_report(params):
    start, end = _date_range(params)
    return FinancialReportInput(start_date=start, end_date=end)


def parse_inventory_report(params, default_threshold=10):
    params = _require_mapping(params)
    raw = params.get('lowStockThreshold')
    if raw is None or raw == '':
        return InventoryReportInput(low_stock_threshold=default_threshold)
    return InventoryReportInput(low_stock_threshold=parse_int(raw, 'lowStockThreshold', minimum=1))


def parse_category_breakdown(params):
    start, end = _date_range(params)
    raw_type = params.get('type')
    if raw_type in (None, ''):
        return CategoryBreakdownInput(start_date=start, end_date=end)
    return CategoryBreakdownInput(start_date=start, end_date=end, type=_transaction_type(raw_type, 'type'))
