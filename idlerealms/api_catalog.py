"""Read-only catalog: items, realms and the monsters living in them."""
from flask import Blueprint, jsonify

from .config import RARITIES, REALMS
from .errors import NotFound
from .models import db, Item, Monster, Realm
from .serializers import serialize_item, serialize_monster, serialize_realm

bp = Blueprint("catalog_api", __name__, url_prefix="/api")


@bp.get("/items")
def list_items():
    rows = db.session.query(Item).all()

    def keyfn(itm):
        try:
            ri = RARITIES.index(itm.rarity)
        except ValueError:
            ri = len(RARITIES)
        return (ri, itm.name)

    return jsonify([serialize_item(itm) for itm in sorted(rows, key=keyfn)])


@bp.get("/realms")
def list_realms():
    rows = db.session.query(Realm).order_by(Realm.required_level, Realm.id).all()
    return jsonify([serialize_realm(r) for r in rows])


@bp.get("/realms/<realm>/monsters")
def realm_monsters(realm: str):
    if realm not in REALMS:
        raise NotFound("Unknown realm")
    rows = (
        db.session.query(Monster)
        .filter(Monster.realm == realm)
        .order_by(Monster.level, Monster.id)
        .all()
    )
    return jsonify([serialize_monster(m) for m in rows])
