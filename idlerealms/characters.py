# idlerealms/characters.py
import logging

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from .config import PROFESSION_TYPES, STARTING_STATS
from .errors import NotFound
from .models import db, Character, Profession, User
from .payload import CharacterCreate, parse_body
from .serializers import serialize_character, serialize_profession

logger = logging.getLogger(__name__)

characters_bp = Blueprint("characters_bp", __name__, url_prefix="/api")


@characters_bp.post("/characters")
@login_required
def create_character():
    body = parse_body(CharacterCreate)
    ch = Character(user_id=current_user.user_id, name=body.name, **STARTING_STATS)
    db.session.add(ch)
    db.session.flush()
    for kind in PROFESSION_TYPES:
        db.session.add(Profession(character_id=ch.character_id, type=kind, level=1, experience=0))
    db.session.commit()
    logger.info("character_create user_id=%s character_id=%s", current_user.user_id, ch.character_id)
    return jsonify(serialize_character(ch)), 201


@characters_bp.get("/characters/<character_id>")
def get_character(character_id: str):
    ch = db.session.get(Character, character_id)
    if not ch:
        raise NotFound("Character not found")
    return jsonify(serialize_character(ch))


@characters_bp.get("/users/<user_id>/characters")
def list_user_characters(user_id: str):
    if db.session.get(User, user_id) is None:
        raise NotFound("User not found")
    rows = Character.query.filter_by(user_id=user_id).order_by(Character.created_at).all()
    return jsonify([serialize_character(ch) for ch in rows])


@characters_bp.get("/characters/<character_id>/professions")
def get_professions(character_id: str):
    if db.session.get(Character, character_id) is None:
        raise NotFound("Character not found")
    rows = Profession.query.filter_by(character_id=character_id).order_by(Profession.type).all()
    return jsonify([serialize_profession(p) for p in rows])
