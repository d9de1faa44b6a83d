import logging
import os
from datetime import datetime, timezone

from flask import Blueprint, Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from errors import BookkeepingError, ValidationError
from models import db
from schemas import (
    parse_category_breakdown,
    parse_financial_report,
    parse_inventory_item_input,
    parse_inventory_item_patch,
    parse_inventory_report,
    parse_transaction_input,
    parse_transaction_patch,
)
from services import csv_io, inventory, reports, transactions

api = Blueprint('api', __name__)


def create_app(test_config=None):
    app = Flask(__name__)
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///bookkeeping.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['LOW_STOCK_THRESHOLD'] = int(os.environ.get('LOW_STOCK_THRESHOLD', 10))
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    db.init_app(app)
    with app.app_context():
        db.create_all()

    app.register_blueprint(api)
    app.register_error_handler(BookkeepingError, handle_bookkeeping_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
    return app


# ---------------------- Error Handlers ----------------------
def handle_bookkeeping_error(err):
    return jsonify(err.to_dict()), err.status_code


def handle_http_error(err):
    return jsonify({'success': False, 'error': err.name, 'message': err.description}), err.code


def handle_unexpected_error(err):
    current_app.logger.exception('Unhandled error on %s %s', request.method, request.path)
    return jsonify({'success': False, 'error': 'InternalError', 'message': 'Internal server error.'}), 500


# ---------------------- Request Helpers ----------------------
def _json_body():
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError('Request body must be a JSON object.')
    return payload


def _csv_response(text, filename):
    output = text.encode('utf-8')
    return (output, 200, {'Content-Type': 'text/csv; charset=utf-8',
                          'Content-Disposition': f'attachment; filename={filename}'})


# ---------------------- API: Health ----------------------
@api.route('/api/healthcheck')
def healthcheck():
    return jsonify({'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()})


# ---------------------- API: Transactions ----------------------
@api.route('/api/transactions', methods=['GET'])
def list_transactions():
    return jsonify([tx.to_dict() for tx in transactions.list_transactions()])


@api.route('/api/transactions', methods=['POST'])
def create_transaction():
    tx = transactions.create_transaction(parse_transaction_input(_json_body()))
    return jsonify(tx.to_dict()), 201


@api.route('/api/transactions/<int:txn_id>', methods=['PATCH'])
def update_transaction(txn_id):
    tx = transactions.update_transaction(txn_id, parse_transaction_patch(_json_body()))
    return jsonify(tx.to_dict())


@api.route('/api/transactions/<int:txn_id>', methods=['DELETE'])
def delete_transaction(txn_id):
    return jsonify(transactions.delete_transaction(txn_id))


@api.route('/api/transactions/import', methods=['POST'])
def import_transactions():
    file = request.files.get('file')
    if not file:
        raise ValidationError('No file uploaded.')
    return jsonify(csv_io.import_transactions(file)), 201


# ---------------------- API: Inventory ----------------------
@api.route('/api/inventory', methods=['GET'])
def list_inventory_items():
    return jsonify([item.to_dict() for item in inventory.list_inventory_items()])


@api.route('/api/inventory', methods=['POST'])
def create_inventory_item():
    item = inventory.create_inventory_item(parse_inventory_item_input(_json_body()))
    return jsonify(item.to_dict()), 201


@api.route('/api/inventory/<int:item_id>', methods=['PATCH'])
def update_inventory_item(item_id):
    item = inventory.update_inventory_item(item_id, parse_inventory_item_patch(_json_body()))
    return jsonify(item.to_dict())


@api.route('/api/inventory/<int:item_id>', methods=['DELETE'])
def delete_inventory_item(item_id):
    return jsonify(inventory.delete_inventory_item(item_id))


# ---------------------- API: Reports ----------------------
@api.route('/api/reports/financial_summary')
def financial_summary():
    return jsonify(reports.get_financial_summary(parse_financial_report(request.args.to_dict())))


@api.route('/api/reports/inventory_summary')
def inventory_summary():
    params = parse_inventory_report(request.args.to_dict(), current_app.config['LOW_STOCK_THRESHOLD'])
    return jsonify(reports.get_inventory_summary(params))


@api.route('/api/reports/category_breakdown')
def category_breakdown():
    return jsonify(reports.get_category_breakdown(parse_category_breakdown(request.args.to_dict())))


# ---------------------- Export CSV ----------------------
@api.route('/export/transactions.csv')
def export_transactions():
    return _csv_response(csv_io.export_transactions_csv(), 'transactions.csv')


@api.route('/export/inventory.csv')
def export_inventory():
    return _csv_response(csv_io.export_inventory_csv(), 'inventory.csv')


# ---------------------- Run App ----------------------
if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=True)
