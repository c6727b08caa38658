"""AFK session endpoints."""
from flask import Blueprint, current_app, jsonify

from .errors import NotFound
from .models import db, Character
from .payload import AfkStart, parse_body
from .serializers import serialize_afk_session, serialize_character
from .services.afk import complete_session, get_active_session, list_sessions, start_session
from .services.rewards import table_from_config

bp = Blueprint("afk_api", __name__, url_prefix="/api")


@bp.post("/afk/start")
def start():
    """Body: { character_id: str, duration_hours: int }"""
    body = parse_body(AfkStart)
    session = start_session(body.character_id, body.duration_hours)
    return jsonify(serialize_afk_session(session)), 201


@bp.post("/afk/<int:session_id>/complete")
def complete(session_id: int):
    session = complete_session(session_id, reward_table=table_from_config(current_app.config))
    if session is None:
        return jsonify(ok=False, session=None)
    character = db.session.get(Character, session.character_id)
    return jsonify(
        ok=True,
        session=serialize_afk_session(session),
        character=serialize_character(character),
    )


@bp.get("/characters/<character_id>/afk")
def afk_status(character_id: str):
    character = db.session.get(Character, character_id)
    if not character:
        raise NotFound("Character not found")
    active = get_active_session(character_id)
    return jsonify(
        character_id=character_id,
        afk_state=character.afk_state.value,
        active=serialize_afk_session(active) if active else None,
        history=[serialize_afk_session(s) for s in list_sessions(character_id)],
    )
