"""Turn model rows into JSON serializable dicts."""
from decimal import Decimal


def _iso(value):
    return value.isoformat() if value is not None else None


def money(amount: Decimal | None) -> str | None:
    if amount is None:
        return None
    return f"{Decimal(amount):.2f}"


def serialize_user(u) -> dict:
    return {
        "user_id": u.user_id,
        "username": u.username,
        "email": u.email,
        "membership_type": u.membership_type,
        "created_at": _iso(u.created_at),
        "last_login_at": _iso(u.last_login_at),
    }


def serialize_character(ch) -> dict:
    return {
        "character_id": ch.character_id,
        "user_id": ch.user_id,
        "name": ch.name,
        "level": ch.level,
        "experience": ch.experience,
        "health": ch.health,
        "max_health": ch.max_health,
        "attack": ch.attack,
        "defense": ch.defense,
        "current_realm": ch.current_realm,
        "is_afk": ch.is_afk,
        "afk_state": ch.afk_state.value,
        "afk_start_time": _iso(ch.afk_start_time),
        "afk_end_time": _iso(ch.afk_end_time),
        "created_at": _iso(ch.created_at),
        "updated_at": _iso(ch.updated_at),
    }


def serialize_item(itm) -> dict:
    return {
        "item_id": itm.item_id,
        "name": itm.name,
        "description": itm.description,
        "type": itm.type,
        "rarity": itm.rarity,
        "equipment_slot": itm.equipment_slot,
        "attack_bonus": itm.attack_bonus,
        "defense_bonus": itm.defense_bonus,
        "health_bonus": itm.health_bonus,
        "required_level": itm.required_level,
        "market_value": money(itm.market_value),
    }


def serialize_inventory_entry(entry, item=None) -> dict:
    data = {
        "character_id": entry.character_id,
        "item_id": entry.item_id,
        "quantity": entry.quantity,
        "is_equipped": bool(entry.is_equipped),
        "created_at": _iso(entry.created_at),
        "updated_at": _iso(entry.updated_at),
    }
    if item is not None:
        data["item"] = serialize_item(item)
    return data


def serialize_afk_session(s) -> dict:
    return {
        "id": s.id,
        "character_id": s.character_id,
        "start_time": _iso(s.start_time),
        "end_time": _iso(s.end_time),
        "realm": s.realm,
        "status": s.status,
        "is_completed": s.is_completed,
        "experience_gained": s.experience_gained,
        "items_found": list(s.items_found or []),
        "created_at": _iso(s.created_at),
        "completed_at": _iso(s.completed_at),
    }


def serialize_listing(listing, *, detailed: bool = False) -> dict:
    data = {
        "id": listing.id,
        "seller_id": listing.seller_id,
        "item_id": listing.item_id,
        "quantity": listing.quantity,
        "price_per_unit": money(listing.price_per_unit),
        "total_price": money(listing.total_price),
        "is_active": listing.is_active,
        "buyer_id": listing.buyer_id,
        "created_at": _iso(listing.created_at),
        "updated_at": _iso(listing.updated_at),
    }
    if detailed:
        data["item"] = serialize_item(listing.item) if listing.item else None
        data["seller_name"] = listing.seller.name if listing.seller else None
    return data


def serialize_realm(r) -> dict:
    return {
        "id": r.id,
        "name": r.name,
        "display_name": r.display_name,
        "required_level": r.required_level,
        "required_boss_defeated": r.required_boss_defeated,
        "description": r.description,
    }


def serialize_monster(m) -> dict:
    return {
        "id": m.id,
        "name": m.name,
        "realm": m.realm,
        "type": m.type,
        "level": m.level,
        "health": m.health,
        "attack": m.attack,
        "defense": m.defense,
        "experience_reward": m.experience_reward,
    }


def serialize_profession(p) -> dict:
    return {
        "id": p.id,
        "character_id": p.character_id,
        "type": p.type,
        "level": p.level,
        "experience": p.experience,
    }


def serialize_chat_message(m) -> dict:
    return {
        "id": m.id,
        "user_id": m.user_id,
        "username": m.username,
        "message": m.message,
        "created_at": _iso(m.created_at),
    }
