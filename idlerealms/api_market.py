"""Marketplace endpoints."""
from flask import Blueprint, current_app, jsonify

from .payload import ListingCreate, Purchase, parse_body
from .serializers import serialize_listing
from .services.market import create_listing, list_active, purchase

bp = Blueprint("market_api", __name__, url_prefix="/api/market")


@bp.get("/listings")
def get_listings():
    return jsonify([serialize_listing(listing, detailed=True) for listing in list_active()])


@bp.post("/listings")
def post_listing():
    """Body: { seller_id, item_id, quantity, price_per_unit }

    ``price_per_unit`` may be a number or a decimal string ("50.25").
    """
    body = parse_body(ListingCreate)
    listing = create_listing(body.seller_id, body.item_id, body.quantity, body.price_per_unit)
    return jsonify(serialize_listing(listing)), 201


@bp.post("/listings/<int:listing_id>/purchase")
def post_purchase(listing_id: int):
    """Body: { buyer_id }"""
    body = parse_body(Purchase)
    listing = purchase(
        listing_id,
        body.buyer_id,
        debit_seller=bool(current_app.config.get("MARKET_DEBIT_SELLER_ON_PURCHASE")),
    )
    if listing is None:
        return jsonify(ok=False, listing=None)
    return jsonify(ok=True, listing=serialize_listing(listing))
