"""Global chat: HTTP history plus a Socket.IO broadcast of new messages."""
import logging

from flask import Blueprint, current_app, jsonify, request
from flask_socketio import SocketIO
from werkzeug.exceptions import BadRequest

from .errors import NotFound
from .models import db, ChatMessage, User
from .payload import ChatPost, parse_body
from .serializers import serialize_chat_message

logger = logging.getLogger(__name__)

bp = Blueprint("chat_api", __name__, url_prefix="/api")
socketio = SocketIO()

MAX_HISTORY = 200


@bp.get("/chat")
def get_messages():
    default = current_app.config.get("CHAT_HISTORY_LIMIT", 50)
    try:
        limit = int(request.args.get("limit", default))
    except ValueError:
        raise BadRequest("limit must be an integer") from None
    limit = max(1, min(limit, MAX_HISTORY))
    rows = (
        db.session.query(ChatMessage)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify([serialize_chat_message(m) for m in rows])


@bp.post("/chat")
def send_message():
    """Body: { user_id, message }"""
    body = parse_body(ChatPost)
    user = db.session.get(User, body.user_id)
    if not user:
        raise NotFound("User not found")
    msg = ChatMessage(user_id=user.user_id, username=user.username, message=body.message)
    db.session.add(msg)
    db.session.commit()
    payload = serialize_chat_message(msg)
    socketio.emit("chat_message", payload)
    logger.info("chat_message id=%s user_id=%s", msg.id, user.user_id)
    return jsonify(payload), 201
