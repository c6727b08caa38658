"""Marketplace: fixed-price listings and atomic purchases.

Creating a listing only announces it; the seller's stock is checked but not
held. A purchase credits the buyer and closes the listing in one
transaction, and a listing can be sold at most once.
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import sqlalchemy as sa
from sqlalchemy.orm import joinedload

from ..errors import InsufficientStock, InvalidState, NotFound
from ..models import db, Character, InventoryEntry, MarketListing
from ..models.base import utcnow
from .inventory import credit, debit

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Numeric(10, 2) upper bound
MAX_MONEY = Decimal("99999999.99")


def to_money(value) -> Decimal:
    """Parse a price into a 2-decimal ``Decimal`` (half-up)."""
    if isinstance(value, bool) or value is None:
        raise InvalidState("price must be a number")
    try:
        amount = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise InvalidState("price must be a number") from None
    if not amount.is_finite():
        raise InvalidState("price must be a number")
    return amount


def create_listing(seller_id: str, item_id: str, quantity: int, price_per_unit) -> MarketListing:
    """Offer ``quantity`` units at ``price_per_unit`` each.

    Raises:
        InvalidState: non-positive quantity or price.
        NotFound: the seller holds none of the item.
        InsufficientStock: the seller holds fewer units than offered.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidState("quantity must be a positive integer")
    price = to_money(price_per_unit)
    if price <= 0:
        raise InvalidState("price_per_unit must be positive")
    total = (price * quantity).quantize(CENT, rounding=ROUND_HALF_UP)
    if total > MAX_MONEY:
        raise InvalidState("total_price is too large")

    try:
        entry = db.session.get(InventoryEntry, (seller_id, item_id))
        if entry is None:
            raise NotFound("Item not found in seller inventory")
        if entry.quantity < quantity:
            raise InsufficientStock(
                f"Insufficient quantity in inventory: have {entry.quantity}, listing {quantity}"
            )
        listing = MarketListing(
            seller_id=seller_id,
            item_id=item_id,
            quantity=quantity,
            price_per_unit=price,
            total_price=total,
            is_active=True,
        )
        db.session.add(listing)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "market_list listing_id=%s seller_id=%s item_id=%s quantity=%s price_per_unit=%s total=%s",
        listing.id,
        seller_id,
        item_id,
        quantity,
        price,
        total,
    )
    return listing


def list_active() -> list[MarketListing]:
    return (
        db.session.query(MarketListing)
        .options(joinedload(MarketListing.item), joinedload(MarketListing.seller))
        .filter(MarketListing.is_active.is_(True))
        .order_by(MarketListing.id)
        .all()
    )


def purchase(listing_id: int, buyer_id: str, *, debit_seller: bool = False) -> MarketListing | None:
    """Buy a whole listing.

    Returns the closed listing, or ``None`` when the listing is gone or
    already sold, the buyer is unknown, or the buyer is the seller. With
    ``debit_seller`` the seller's stack is reduced too, and a seller who no
    longer holds the units makes the purchase fail with ``None``.
    """
    try:
        listing = db.session.execute(
            sa.select(MarketListing).where(MarketListing.id == listing_id).with_for_update()
        ).scalar_one_or_none()
        reason = None
        if listing is None or not listing.is_active:
            reason = "not_purchasable"
        elif db.session.get(Character, buyer_id) is None:
            reason = "unknown_buyer"
        elif listing.seller_id == buyer_id:
            reason = "self_trade"
        if reason:
            db.session.rollback()
            logger.info(
                "market_purchase_skipped listing_id=%s buyer_id=%s reason=%s",
                listing_id,
                buyer_id,
                reason,
            )
            return None

        seller_id = listing.seller_id
        item_id = listing.item_id
        quantity = listing.quantity
        if debit_seller:
            try:
                debit(seller_id, item_id, quantity)
            except InsufficientStock:
                db.session.rollback()
                logger.info(
                    "market_purchase_skipped listing_id=%s buyer_id=%s reason=seller_out_of_stock",
                    listing_id,
                    buyer_id,
                )
                return None

        credit(buyer_id, item_id, quantity)
        claimed = db.session.execute(
            sa.update(MarketListing)
            .where(MarketListing.id == listing_id, MarketListing.is_active.is_(True))
            .values(is_active=False, buyer_id=buyer_id, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        ).rowcount
        if claimed != 1:
            db.session.rollback()
            logger.info(
                "market_purchase_skipped listing_id=%s buyer_id=%s reason=lost_race",
                listing_id,
                buyer_id,
            )
            return None
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "market_purchase listing_id=%s seller_id=%s buyer_id=%s item_id=%s quantity=%s debit_seller=%s",
        listing_id,
        seller_id,
        buyer_id,
        item_id,
        quantity,
        debit_seller,
    )
    return db.session.get(MarketListing, listing_id)
