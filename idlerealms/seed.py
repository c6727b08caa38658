"""Starter catalog: realms, monsters and items.

``seed_catalog`` is idempotent; rows are matched by key and updated in place.
"""
from decimal import Decimal

from .models import db, Item, Monster, Realm

REALM_ROWS = [
    {"name": "earth", "display_name": "Earth", "required_level": 1, "required_boss_defeated": None,
     "description": "Green fields and old mines. Where every adventurer begins."},
    {"name": "moon", "display_name": "The Moon", "required_level": 10, "required_boss_defeated": "Stone Colossus",
     "description": "Low gravity, lower mercy."},
    {"name": "mars", "display_name": "Mars", "required_level": 25, "required_boss_defeated": "Lunar Wyrm",
     "description": "Red dust and richer ore."},
]

MONSTER_ROWS = [
    {"name": "Slime", "realm": "earth", "type": "normal", "level": 1, "health": 30, "attack": 4, "defense": 1, "experience_reward": 10},
    {"name": "Goblin", "realm": "earth", "type": "normal", "level": 3, "health": 50, "attack": 7, "defense": 3, "experience_reward": 20},
    {"name": "Stone Colossus", "realm": "earth", "type": "boss", "level": 9, "health": 400, "attack": 25, "defense": 18, "experience_reward": 500},
    {"name": "Crater Crawler", "realm": "moon", "type": "normal", "level": 11, "health": 120, "attack": 18, "defense": 10, "experience_reward": 60},
    {"name": "Lunar Wyrm", "realm": "moon", "type": "boss", "level": 22, "health": 1200, "attack": 55, "defense": 35, "experience_reward": 2000},
    {"name": "Dust Stalker", "realm": "mars", "type": "elite", "level": 27, "health": 600, "attack": 60, "defense": 40, "experience_reward": 400},
]

ITEM_ROWS = [
    {"item_id": "iron_ore", "name": "Iron Ore", "description": "Raw ore, the staple of every trade.",
     "type": "material", "rarity": "common", "equipment_slot": None, "market_value": "5.00"},
    {"item_id": "oak_log", "name": "Oak Log", "description": "Sturdy timber.",
     "type": "material", "rarity": "common", "equipment_slot": None, "market_value": "3.00"},
    {"item_id": "minor_potion", "name": "Minor Health Potion", "description": "Restores a little health.",
     "type": "potion", "rarity": "common", "equipment_slot": None, "health_bonus": 25, "market_value": "10.00"},
    {"item_id": "iron_sword", "name": "Iron Sword", "description": "A sturdy iron sword.",
     "type": "weapon", "rarity": "common", "equipment_slot": "weapon", "attack_bonus": 5, "market_value": "100.50"},
    {"item_id": "leather_cap", "name": "Leather Cap", "description": "Better than nothing.",
     "type": "armor", "rarity": "common", "equipment_slot": "helmet", "defense_bonus": 1, "market_value": "12.00"},
    {"item_id": "iron_helm", "name": "Iron Helm", "description": "Dented, dependable.",
     "type": "armor", "rarity": "uncommon", "equipment_slot": "helmet", "defense_bonus": 3,
     "required_level": 5, "market_value": "45.00"},
    {"item_id": "lunar_plate", "name": "Lunar Plate", "description": "Forged under a black sky.",
     "type": "armor", "rarity": "epic", "equipment_slot": "chest", "defense_bonus": 20,
     "required_level": 20, "market_value": "2500.00"},
]


def _upsert(model, key: str, rows: list[dict]) -> tuple[int, int]:
    created = updated = 0
    for row in rows:
        row = dict(row)
        if "market_value" in row:
            row["market_value"] = Decimal(row["market_value"])
        existing = db.session.query(model).filter(getattr(model, key) == row[key]).first()
        if existing:
            for field, value in row.items():
                setattr(existing, field, value)
            updated += 1
        else:
            db.session.add(model(**row))
            created += 1
    return created, updated


def seed_catalog() -> dict:
    counts = {
        "realms": _upsert(Realm, "name", REALM_ROWS),
        "items": _upsert(Item, "item_id", ITEM_ROWS),
    }
    # monsters have no natural key beyond (realm, name)
    created = 0
    for row in MONSTER_ROWS:
        exists = Monster.query.filter_by(realm=row["realm"], name=row["name"]).first()
        if not exists:
            db.session.add(Monster(**row))
            created += 1
    counts["monsters"] = (created, 0)
    db.session.commit()
    return counts
