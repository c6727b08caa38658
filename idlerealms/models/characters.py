import enum

from sqlalchemy import CheckConstraint
from sqlalchemy.ext.hybrid import hybrid_property

from ..config import REALMS
from .base import db, Model, gen_uuid, sql_in, utcnow


class AfkState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class Character(Model):
    __tablename__ = "character"

    character_id = db.Column(db.String(64), primary_key=True, default=gen_uuid)
    user_id = db.Column(db.String(64), db.ForeignKey("users.user_id"), nullable=False, index=True)
    name = db.Column(db.String(20), nullable=False, index=True)

    # progression
    level = db.Column(db.Integer, nullable=False, default=1)
    experience = db.Column(db.BigInteger, nullable=False, default=0)
    health = db.Column(db.Integer, nullable=False, default=100)
    max_health = db.Column(db.Integer, nullable=False, default=100)
    attack = db.Column(db.Integer, nullable=False, default=10)
    defense = db.Column(db.Integer, nullable=False, default=5)
    current_realm = db.Column(db.String(16), nullable=False, default="earth")

    # AFK window; both set while a session runs, both null otherwise
    afk_start_time = db.Column(db.DateTime)
    afk_end_time = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    inventory = db.relationship(
        "InventoryEntry", back_populates="character", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("experience >= 0", name="ck_character_xp_nonneg"),
        CheckConstraint(
            "(afk_start_time IS NULL AND afk_end_time IS NULL) OR "
            "(afk_start_time IS NOT NULL AND afk_end_time IS NOT NULL "
            "AND afk_end_time > afk_start_time)",
            name="ck_character_afk_window",
        ),
        CheckConstraint(sql_in("current_realm", REALMS), name="ck_character_realm"),
    )

    @hybrid_property
    def is_afk(self):
        return self.afk_end_time is not None

    @is_afk.expression
    def is_afk(cls):
        return cls.afk_end_time.isnot(None)

    @property
    def afk_state(self) -> AfkState:
        return AfkState.RUNNING if self.is_afk else AfkState.IDLE
