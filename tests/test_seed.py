from decimal import Decimal

from idlerealms import create_app
from idlerealms.models import db, Item, Monster, Realm
from idlerealms.seed import ITEM_ROWS, MONSTER_ROWS, REALM_ROWS, seed_catalog

TEST_CONFIG = {"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "AUTO_CREATE_TABLES": True}


def test_seed_is_idempotent():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.drop_all(); db.create_all()
        first = seed_catalog()
        assert first["items"] == (len(ITEM_ROWS), 0)
        second = seed_catalog()
        assert second["items"] == (0, len(ITEM_ROWS))
        assert second["monsters"] == (0, 0)
        assert Item.query.count() == len(ITEM_ROWS)
        assert Realm.query.count() == len(REALM_ROWS)
        assert Monster.query.count() == len(MONSTER_ROWS)


def test_seeded_items_are_consistent():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.drop_all(); db.create_all()
        seed_catalog()
        sword = db.session.get(Item, "iron_sword")
        assert sword.is_equippable
        assert sword.market_value == Decimal("100.50")
        ore = db.session.get(Item, "iron_ore")
        assert not ore.is_equippable
        assert db.session.get(Item, "iron_helm").required_level == 5
