"""Inventory ledger: per-character stacks and equipped flags.

``update_inventory`` is the public mutation. ``credit`` and ``debit`` are the
building blocks the AFK engine and the market use inside their own
transactions; they never commit.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.orm import joinedload

from ..config import MAX_STACK
from ..errors import InsufficientStock, InvalidState, NotFound
from ..models import db, Character, Item, InventoryEntry
from ..models.base import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventoryView:
    """Detached snapshot of an inventory entry.

    A deleted entry is reported as quantity 0, unequipped.
    """

    character_id: str
    item_id: str
    quantity: int
    is_equipped: bool
    created_at: dt.datetime | None
    updated_at: dt.datetime

    @classmethod
    def from_entry(cls, entry: InventoryEntry) -> "InventoryView":
        return cls(
            character_id=entry.character_id,
            item_id=entry.item_id,
            quantity=entry.quantity,
            is_equipped=bool(entry.is_equipped),
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


def _check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidState("quantity must be an integer")
    if quantity > MAX_STACK:
        raise InvalidState(f"quantity must be at most {MAX_STACK}")
    return quantity


def _get_entry(character_id: str, item_id: str) -> InventoryEntry | None:
    stmt = (
        sa.select(InventoryEntry)
        .where(InventoryEntry.character_id == character_id, InventoryEntry.item_id == item_id)
        .with_for_update()
    )
    return db.session.execute(stmt).scalar_one_or_none()


def _evict_slot(character_id: str, item: Item) -> int:
    """Unequip whatever else the character wears in ``item``'s slot."""
    same_slot = sa.select(Item.item_id).where(Item.equipment_slot == item.equipment_slot)
    result = db.session.execute(
        sa.update(InventoryEntry)
        .where(
            InventoryEntry.character_id == character_id,
            InventoryEntry.is_equipped.is_(True),
            InventoryEntry.item_id != item.item_id,
            InventoryEntry.item_id.in_(same_slot),
        )
        .values(is_equipped=False, updated_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


def update_inventory(
    character_id: str, item_id: str, quantity: int, equip: bool | None = None
) -> InventoryView:
    """Set a character's stack of ``item_id`` to ``quantity``.

    ``equip=None`` leaves the equipped flag alone. Equipping a slotted item
    unequips every other item the character wears in that slot. Equipping an
    item without a slot is accepted and changes nothing.

    Raises:
        NotFound: unknown character or item.
        InvalidState: creating an entry with ``quantity <= 0``, or equipping
            an item above the character's level.
    """
    quantity = _check_quantity(quantity)
    try:
        char = db.session.get(Character, character_id)
        if not char:
            raise NotFound("Character not found")
        item = db.session.get(Item, item_id)
        if not item:
            raise NotFound("Item not found")

        entry = _get_entry(character_id, item_id)

        if quantity <= 0:
            if entry is None:
                raise InvalidState("Cannot create an inventory entry with a non-positive quantity")
            view = InventoryView(
                character_id=character_id,
                item_id=item_id,
                quantity=0,
                is_equipped=False,
                created_at=entry.created_at,
                updated_at=utcnow(),
            )
            db.session.delete(entry)
            db.session.commit()
            logger.info(
                "inventory_update character_id=%s item_id=%s quantity=0 removed=True",
                character_id,
                item_id,
            )
            return view

        wants_equip = bool(equip) and item.is_equippable
        evicted = 0
        if wants_equip:
            if item.required_level > char.level:
                raise InvalidState(
                    f"{item.name} requires level {item.required_level}",
                    code="level_too_low",
                )
            evicted = _evict_slot(character_id, item)

        if entry is None:
            entry = InventoryEntry(
                character_id=character_id,
                item_id=item_id,
                quantity=quantity,
                is_equipped=wants_equip,
            )
            db.session.add(entry)
        else:
            entry.quantity = quantity
            if equip is not None:
                entry.is_equipped = wants_equip
            entry.updated_at = utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "inventory_update character_id=%s item_id=%s quantity=%s equipped=%s evicted=%s",
        character_id,
        item_id,
        entry.quantity,
        entry.is_equipped,
        evicted,
    )
    return InventoryView.from_entry(entry)


def list_inventory(character_id: str) -> list[InventoryEntry]:
    if db.session.get(Character, character_id) is None:
        raise NotFound("Character not found")
    return (
        db.session.query(InventoryEntry)
        .options(joinedload(InventoryEntry.item))
        .filter(InventoryEntry.character_id == character_id)
        .all()
    )


def credit(character_id: str, item_id: str, quantity: int) -> InventoryEntry:
    """Add ``quantity`` units to a stack, creating it unequipped if needed."""
    if _check_quantity(quantity) <= 0:
        raise InvalidState("Credited quantity must be positive")
    if db.session.get(Item, item_id) is None:
        raise NotFound(f"Item {item_id} not found")
    entry = _get_entry(character_id, item_id)
    if entry is None:
        entry = InventoryEntry(
            character_id=character_id, item_id=item_id, quantity=quantity, is_equipped=False
        )
        db.session.add(entry)
    else:
        total = entry.quantity + quantity
        if total > MAX_STACK:
            raise InvalidState(f"Stack of {item_id} would exceed {MAX_STACK}")
        entry.quantity = total
        entry.updated_at = utcnow()
    return entry


def debit(character_id: str, item_id: str, quantity: int) -> int:
    """Remove ``quantity`` units from a stack and return what is left."""
    if _check_quantity(quantity) <= 0:
        raise InvalidState("Debited quantity must be positive")
    entry = _get_entry(character_id, item_id)
    if entry is None or entry.quantity < quantity:
        raise InsufficientStock("Not enough items in inventory")
    remaining = entry.quantity - quantity
    if remaining == 0:
        db.session.delete(entry)
    else:
        entry.quantity = remaining
        entry.updated_at = utcnow()
    return remaining
