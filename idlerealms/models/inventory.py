from sqlalchemy import CheckConstraint, ForeignKey

from .base import db, Model, utcnow


class InventoryEntry(Model):
    """One stack of an item owned by a character.

    Rows never hold a zero quantity: emptying a stack deletes the row.
    """

    __tablename__ = "inventory"

    character_id = db.Column(
        db.String(64), ForeignKey("character.character_id", ondelete="CASCADE"), primary_key=True
    )
    item_id = db.Column(db.String(64), ForeignKey("items.item_id"), primary_key=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    is_equipped = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    character = db.relationship("Character", back_populates="inventory")
    item = db.relationship("Item")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_inventory_qty_pos"),
    )
