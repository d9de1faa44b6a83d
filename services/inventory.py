from flask import current_app

from errors import Conflict, NotFound
from models import db, InventoryItem, utcnow
from services.session import commit


def _sku_taken(sku, exclude_id=None):
    q = InventoryItem.query.filter(InventoryItem.sku == sku)
    if exclude_id is not None:
        q = q.filter(InventoryItem.id != exclude_id)
    return db.session.query(q.exists()).scalar()


def create_inventory_item(data):
    if _sku_taken(data.sku):
        current_app.logger.warning('Rejected inventory item with duplicate SKU %r', data.sku)
        raise Conflict(f"Item with SKU '{data.sku}' already exists.")
    now = utcnow()
    item = InventoryItem(
        item_name=data.item_name,
        sku=data.sku,
        quantity=data.quantity,
        unit_cost=data.unit_cost,
        selling_price=data.selling_price,
        created_at=now,
        updated_at=now,
    )
    db.session.add(item)
    commit('Inventory item creation', conflict=Conflict(f"Item with SKU '{data.sku}' already exists."))
    current_app.logger.info('Created inventory item %s (SKU %s)', item.id, item.sku)
    return item


def list_inventory_items():
    return InventoryItem.query.order_by(InventoryItem.item_name.asc(), InventoryItem.id.asc()).all()


def get_inventory_item(item_id):
    item = db.session.get(InventoryItem, item_id)
    if item is None:
        raise NotFound(f'Inventory item with id {item_id} not found.')
    return item


def update_inventory_item(item_id, patch):
    item = get_inventory_item(item_id)
    sku = patch.changes.get('sku')
    if sku is not None and _sku_taken(sku, exclude_id=item_id):
        current_app.logger.warning('Rejected SKU change on item %s: %r belongs to another item', item_id, sku)
        raise Conflict(f"SKU '{sku}' already exists for another item.")
    for attr, value in patch.changes.items():
        setattr(item, attr, value)
    item.updated_at = max(utcnow(), item.created_at)
    commit('Inventory item update', conflict=Conflict(f"SKU '{item.sku}' already exists for another item."))
    current_app.logger.info('Updated inventory item %s (%s)', item_id, ', '.join(sorted(patch.changes)) or 'no changes')
    return item


def delete_inventory_item(item_id):
    item = get_inventory_item(item_id)
    db.session.delete(item)
    commit('Inventory item deletion')
    current_app.logger.info('Deleted inventory item %s', item_id)
    return {'success': True}
