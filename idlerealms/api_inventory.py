"""Inventory API.

Routes live under ``/api/characters/<character_id>/inventory``. A POST sets
the stack for one item; ``quantity <= 0`` removes it and ``is_equipped``
toggles the equipped flag with slot eviction.
"""
from flask import Blueprint, jsonify

from .payload import InventoryUpdate, parse_body
from .serializers import serialize_inventory_entry
from .services.inventory import list_inventory, update_inventory

bp = Blueprint("inventory_api", __name__, url_prefix="/api")


@bp.get("/characters/<character_id>/inventory")
def get_inventory(character_id: str):
    """Return the character's inventory with catalog details."""
    rows = list_inventory(character_id)
    items = [serialize_inventory_entry(row, row.item) for row in rows]
    items.sort(key=lambda it: (not it["is_equipped"], it["item"]["name"] if it.get("item") else ""))
    return jsonify({"character_id": character_id, "items": items})


@bp.post("/characters/<character_id>/inventory")
def post_inventory(character_id: str):
    """Body: { item_id: str, quantity: int, is_equipped?: bool }"""
    body = parse_body(InventoryUpdate)
    view = update_inventory(character_id, body.item_id, body.quantity, equip=body.is_equipped)
    return jsonify(serialize_inventory_entry(view))
