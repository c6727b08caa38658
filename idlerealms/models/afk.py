from sqlalchemy import CheckConstraint, ForeignKey
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import validates

from .base import db, Model, utcnow
from .characters import AfkState


class AfkSession(Model):
    __tablename__ = "afk_sessions"

    id = db.Column(db.Integer, primary_key=True)
    character_id = db.Column(
        db.String(64), ForeignKey("character.character_id"), nullable=False, index=True
    )
    start_time = db.Column(db.DateTime, nullable=False)
    end_time = db.Column(db.DateTime, nullable=False)
    realm = db.Column(db.String(16), nullable=False)    # snapshot taken at start
    status = db.Column(db.String(16), nullable=False, default=AfkState.RUNNING.value, index=True)
    experience_gained = db.Column(db.Integer, nullable=False, default=0)
    items_found = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    completed_at = db.Column(db.DateTime)

    character = db.relationship("Character")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_afk_sessions_window"),
        CheckConstraint("status IN ('running', 'completed')", name="ck_afk_sessions_status"),
    )

    @hybrid_property
    def is_completed(self):
        return self.status == AfkState.COMPLETED.value

    @validates("status")
    def validate_status(self, key, value):
        value = AfkState(value).value
        if value == AfkState.IDLE.value:
            raise ValueError("a session is either running or completed")
        if self.status == AfkState.COMPLETED.value and value != self.status:
            raise ValueError("completed sessions are immutable")
        return value
