from flask import current_app

from errors import NotFound
from models import db, Transaction
from services.session import commit


def _new_transaction(data):
    return Transaction(
        date=data.date,
        description=data.description,
        amount=data.amount,
        type=data.type,
        category=data.category,
    )


def create_transaction(data):
    tx = _new_transaction(data)
    db.session.add(tx)
    commit('Transaction creation')
    current_app.logger.info('Created transaction %s (%s %s)', tx.id, tx.type.value, tx.amount)
    return tx


def list_transactions():
    return Transaction.query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()


def get_transaction(txn_id):
    tx = db.session.get(Transaction, txn_id)
    if tx is None:
        raise NotFound(f'Transaction with id {txn_id} not found.')
    return tx


def update_transaction(txn_id, patch):
    tx = get_transaction(txn_id)
    for attr, value in patch.changes.items():
        setattr(tx, attr, value)
    commit('Transaction update')
    current_app.logger.info('Updated transaction %s (%s)', txn_id, ', '.join(sorted(patch.changes)) or 'no changes')
    return tx


def delete_transaction(txn_id):
    tx = get_transaction(txn_id)
    db.session.delete(tx)
    commit('Transaction deletion')
    current_app.logger.info('Deleted transaction %s', txn_id)
    return {'success': True}


def add_transactions(rows):
    """Store a batch of validated inputs in one commit."""
    txs = [_new_transaction(row) for row in rows]
    db.session.add_all(txs)
    commit('Transaction import')
    current_app.logger.info('Imported %d transactions', len(txs))
    return txs
