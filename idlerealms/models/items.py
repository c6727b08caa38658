from sqlalchemy import CheckConstraint

from ..config import EQUIPMENT_SLOTS, ITEM_TYPES, RARITIES
from .base import db, Model, sql_in, utcnow


class Item(Model):
    __tablename__ = "items"

    item_id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    type = db.Column(db.String(16), nullable=False)      # weapon/armor/material/potion/other
    rarity = db.Column(db.String(16), nullable=False, default="common")
    equipment_slot = db.Column(db.String(16))            # null for consumables and materials
    attack_bonus = db.Column(db.Integer)
    defense_bonus = db.Column(db.Integer)
    health_bonus = db.Column(db.Integer)
    required_level = db.Column(db.Integer, nullable=False, default=1)
    market_value = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "equipment_slot IS NULL OR " + sql_in("equipment_slot", EQUIPMENT_SLOTS),
            name="ck_items_slot",
        ),
        CheckConstraint(sql_in("type", ITEM_TYPES), name="ck_items_type"),
        CheckConstraint(sql_in("rarity", RARITIES), name="ck_items_rarity"),
    )

    @property
    def is_equippable(self) -> bool:
        return self.equipment_slot is not None
