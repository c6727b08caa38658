from flask_login import UserMixin
from sqlalchemy import CheckConstraint

from ..config import MEMBERSHIP_TYPES
from .base import db, Model, gen_uuid, sql_in, utcnow


class User(Model, UserMixin):
    __tablename__ = "users"

    user_id = db.Column(db.String(64), primary_key=True, default=gen_uuid)
    username = db.Column(db.String(20), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    membership_type = db.Column(db.String(16), nullable=False, default="free")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    last_login_at = db.Column(db.DateTime)

    characters = db.relationship(
        "Character", backref="user", lazy="dynamic", foreign_keys="Character.user_id"
    )

    __table_args__ = (
        CheckConstraint(sql_in("membership_type", MEMBERSHIP_TYPES), name="ck_users_membership"),
    )

    def get_id(self):
        return self.user_id
