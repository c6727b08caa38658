from sqlalchemy import CheckConstraint, ForeignKey
from sqlalchemy.orm import validates

from .base import db, Model, utcnow


class MarketListing(Model):
    __tablename__ = "market_listings"

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(
        db.String(64), ForeignKey("character.character_id"), nullable=False, index=True
    )
    item_id = db.Column(db.String(64), ForeignKey("items.item_id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price_per_unit = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    buyer_id = db.Column(db.String(64), ForeignKey("character.character_id"))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    seller = db.relationship("Character", foreign_keys=[seller_id])
    buyer = db.relationship("Character", foreign_keys=[buyer_id])
    item = db.relationship("Item")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_market_listings_qty_pos"),
        CheckConstraint("price_per_unit > 0", name="ck_market_listings_price_pos"),
    )

    @validates("is_active")
    def validate_is_active(self, key, value):
        if value and self.is_active is False:
            raise ValueError("a sold listing cannot be reactivated")
        return value
