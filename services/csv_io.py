import csv
import io

import pandas as pd

from errors import ValidationError
from models import TransactionCategory, TransactionType
from schemas import parse_transaction_input
from services.inventory import list_inventory_items
from services.transactions import add_transactions, list_transactions

REQUIRED_COLUMNS = ('date', 'description', 'amount', 'type', 'category')

_TYPES = {member.value.lower(): member.value for member in TransactionType}
_CATEGORIES = {member.value.lower(): member.value for member in TransactionCategory}


def read_csv_to_df(file_storage):
    """Read an uploaded CSV into a DataFrame of strings with normalized headers."""
    try:
        df = pd.read_csv(file_storage, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ValidationError(f'Could not read CSV file: {exc}') from None
    # "Transaction Date" -> "transaction_date"
    df.columns = [str(c).strip().lower().replace(' ', '_') for c in df.columns]
    return df


def import_transactions(file_storage):
    """Validate every row first; store all of them or none."""
    df = read_csv_to_df(file_storage)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError(f'CSV must have headers: {", ".join(REQUIRED_COLUMNS)} (missing {", ".join(missing)}).')
    if df.empty:
        raise ValidationError('CSV file contains no transactions.')

    rows = []
    for line, record in enumerate(df.to_dict('records'), start=2):
        ttype = record['type'].strip()
        category = record['category'].strip()
        payload = {
            'date': record['date'],
            'description': record['description'],
            'amount': record['amount'],
            'type': _TYPES.get(ttype.lower(), ttype),
            'category': _CATEGORIES.get(category.lower(), category),
        }
        try:
            rows.append(parse_transaction_input(payload))
        except ValidationError as exc:
            raise ValidationError(f'Line {line}: {exc.message}') from None

    txs = add_transactions(rows)
    return {'success': True, 'imported': len(txs)}


def _write_csv(header, rows):
    si = io.StringIO()
    writer = csv.writer(si)
    writer.writerow(header)
    writer.writerows(rows)
    return si.getvalue()


def export_transactions_csv():
    return _write_csv(
        ['date', 'description', 'amount', 'type', 'category'],
        [[t.date.isoformat(), t.description, str(t.amount), t.type.value, t.category.value]
         for t in list_transactions()],
    )


def export_inventory_csv():
    return _write_csv(
        ['item_name', 'sku', 'quantity', 'unit_cost', 'selling_price', 'total_value'],
        [[i.item_name, i.sku, i.quantity, str(i.unit_cost), str(i.selling_price), str(i.total_value)]
         for i in list_inventory_items()],
    )
