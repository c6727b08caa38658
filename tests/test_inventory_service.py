import pytest

from idlerealms import create_app
from idlerealms.config import MAX_STACK
from idlerealms.errors import InsufficientStock, InvalidState, NotFound
from idlerealms.models import db, User, Character, InventoryEntry
from idlerealms.seed import seed_catalog
from idlerealms.services.inventory import credit, debit, list_inventory, update_inventory

TEST_CONFIG = {"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "AUTO_CREATE_TABLES": True}


def setup_app(level=1):
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.drop_all(); db.create_all()
        seed_catalog()
        user = User(user_id="u1", username="hero", email="hero@example.com", password_hash="x")
        db.session.add(user)
        char = Character(character_id="c1", name="Hero", user_id="u1", level=level)
        db.session.add(char)
        db.session.commit()
        return app, char.character_id


def test_create_and_set_quantity():
    app, cid = setup_app()
    with app.app_context():
        view = update_inventory(cid, "iron_ore", 5)
        assert view.quantity == 5
        assert view.is_equipped is False
        view = update_inventory(cid, "iron_ore", 7)
        assert view.quantity == 7
        assert db.session.get(InventoryEntry, (cid, "iron_ore")).quantity == 7


def test_zero_quantity_removes_entry():
    app, cid = setup_app()
    with app.app_context():
        update_inventory(cid, "iron_sword", 1, equip=True)
        view = update_inventory(cid, "iron_sword", 0)
        assert view.quantity == 0
        assert view.is_equipped is False
        assert db.session.get(InventoryEntry, (cid, "iron_sword")) is None
        assert list_inventory(cid) == []


def test_non_positive_quantity_without_entry_is_rejected():
    app, cid = setup_app()
    with app.app_context():
        with pytest.raises(InvalidState):
            update_inventory(cid, "iron_ore", 0)
        with pytest.raises(InvalidState):
            update_inventory(cid, "iron_ore", -3)
        assert db.session.get(InventoryEntry, (cid, "iron_ore")) is None


def test_non_integer_quantity_is_rejected():
    app, cid = setup_app()
    with app.app_context():
        with pytest.raises(InvalidState):
            update_inventory(cid, "iron_ore", "5")
        with pytest.raises(InvalidState):
            update_inventory(cid, "iron_ore", True)


def test_unknown_character_or_item():
    app, cid = setup_app()
    with app.app_context():
        with pytest.raises(NotFound):
            update_inventory("nope", "iron_ore", 1)
        with pytest.raises(NotFound):
            update_inventory(cid, "mithril_bar", 1)
        with pytest.raises(NotFound):
            list_inventory("nope")


def test_equip_evicts_same_slot_only():
    app, cid = setup_app(level=5)
    with app.app_context():
        update_inventory(cid, "iron_sword", 1, equip=True)
        update_inventory(cid, "leather_cap", 1, equip=True)
        view = update_inventory(cid, "iron_helm", 1, equip=True)
        assert view.is_equipped is True

        db.session.expire_all()
        assert db.session.get(InventoryEntry, (cid, "leather_cap")).is_equipped is False
        assert db.session.get(InventoryEntry, (cid, "iron_helm")).is_equipped is True
        assert db.session.get(InventoryEntry, (cid, "iron_sword")).is_equipped is True

        equipped_helmets = [
            e for e in list_inventory(cid) if e.is_equipped and e.item.equipment_slot == "helmet"
        ]
        assert len(equipped_helmets) == 1


def test_equipping_a_material_is_a_noop():
    app, cid = setup_app()
    with app.app_context():
        view = update_inventory(cid, "iron_ore", 3, equip=True)
        assert view.quantity == 3
        assert view.is_equipped is False


def test_equip_none_keeps_flag():
    app, cid = setup_app()
    with app.app_context():
        update_inventory(cid, "iron_sword", 1, equip=True)
        assert update_inventory(cid, "iron_sword", 2).is_equipped is True
        assert update_inventory(cid, "iron_sword", 2, equip=False).is_equipped is False


def test_equip_above_level_is_rejected():
    app, cid = setup_app(level=1)
    with app.app_context():
        with pytest.raises(InvalidState) as exc:
            update_inventory(cid, "iron_helm", 1, equip=True)
        assert exc.value.code == "level_too_low"
        assert db.session.get(InventoryEntry, (cid, "iron_helm")) is None


def test_credit_merges_and_debit_removes():
    app, cid = setup_app()
    with app.app_context():
        credit(cid, "oak_log", 2)
        credit(cid, "oak_log", 3)
        db.session.commit()
        assert db.session.get(InventoryEntry, (cid, "oak_log")).quantity == 5

        assert debit(cid, "oak_log", 2) == 3
        db.session.commit()
        with pytest.raises(InsufficientStock):
            debit(cid, "oak_log", 4)
        db.session.rollback()

        assert debit(cid, "oak_log", 3) == 0
        db.session.commit()
        assert db.session.get(InventoryEntry, (cid, "oak_log")) is None


def test_quantity_above_stack_limit_is_rejected():
    app, cid = setup_app()
    with app.app_context():
        with pytest.raises(InvalidState):
            update_inventory(cid, "iron_ore", 10**20)
        with pytest.raises(InvalidState):
            update_inventory(cid, "iron_ore", MAX_STACK + 1)
        assert db.session.get(InventoryEntry, (cid, "iron_ore")) is None

        assert update_inventory(cid, "iron_ore", MAX_STACK).quantity == MAX_STACK


def test_credit_cannot_overflow_a_stack():
    app, cid = setup_app()
    with app.app_context():
        update_inventory(cid, "oak_log", MAX_STACK - 1)
        credit(cid, "oak_log", 1)
        db.session.commit()
        with pytest.raises(InvalidState):
            credit(cid, "oak_log", 1)
        db.session.rollback()
        with pytest.raises(InvalidState):
            credit(cid, "iron_ore", MAX_STACK + 1)
        db.session.rollback()
        assert db.session.get(InventoryEntry, (cid, "oak_log")).quantity == MAX_STACK
        assert db.session.get(InventoryEntry, (cid, "iron_ore")) is None
