from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint

from ..config import MONSTER_TYPES, PROFESSION_TYPES
from .base import db, Model, sql_in, utcnow


class Realm(Model):
    __tablename__ = "realms"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(16), unique=True, nullable=False)    # earth/moon/mars
    display_name = db.Column(db.String(64), nullable=False)
    required_level = db.Column(db.Integer, nullable=False, default=1)
    required_boss_defeated = db.Column(db.String(128))
    description = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class Monster(Model):
    __tablename__ = "monsters"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    realm = db.Column(db.String(16), nullable=False, index=True)
    type = db.Column(db.String(16), nullable=False, default="normal")   # normal/elite/boss
    level = db.Column(db.Integer, nullable=False)
    health = db.Column(db.Integer, nullable=False)
    attack = db.Column(db.Integer, nullable=False)
    defense = db.Column(db.Integer, nullable=False)
    experience_reward = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(sql_in("type", MONSTER_TYPES), name="ck_monsters_type"),
    )


class Profession(Model):
    __tablename__ = "professions"

    id = db.Column(db.Integer, primary_key=True)
    character_id = db.Column(
        db.String(64), ForeignKey("character.character_id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = db.Column(db.String(16), nullable=False)    # mining/chopping
    level = db.Column(db.Integer, nullable=False, default=1)
    experience = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("character_id", "type", name="uq_professions_character_type"),
        CheckConstraint(sql_in("type", PROFESSION_TYPES), name="ck_professions_type"),
    )


class ChatMessage(Model):
    __tablename__ = "chat_messages"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), ForeignKey("users.user_id"), nullable=False, index=True)
    username = db.Column(db.String(20), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
