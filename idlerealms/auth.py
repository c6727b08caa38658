import re

from flask import Blueprint, jsonify
from flask_login import LoginManager, current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash, generate_password_hash

from .config import MEMBERSHIP_TYPES
from .models import db, User
from .models.base import utcnow
from .payload import json_body
from .serializers import serialize_user

auth_bp = Blueprint("auth_bp", __name__)
login_manager = LoginManager()

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_RE = re.compile(r"^[a-z0-9_]{3,20}$", re.I)


@login_manager.user_loader
def load_user(user_id):  # called by Flask-Login using session cookie
    return db.session.get(User, user_id)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify(error="unauthorized", message="Login required."), 401


@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    username = str(data.get("username") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    membership_type = data.get("membership_type") or "free"

    if not USERNAME_RE.match(username):
        return jsonify(error="invalid_request", message="Username must be 3-20 letters, digits, underscores."), 400
    if not EMAIL_RE.match(email):
        return jsonify(error="invalid_request", message="Invalid email."), 400
    if not isinstance(password, str) or len(password) < 6:
        return jsonify(error="invalid_request", message="Password must be at least 6 characters."), 400
    if membership_type not in MEMBERSHIP_TYPES:
        return jsonify(error="invalid_request", message="Unknown membership type."), 400

    if User.query.filter_by(email=email).first():
        return jsonify(error="conflict", message="Email already registered."), 409
    if User.query.filter_by(username=username).first():
        return jsonify(error="conflict", message="Username already taken."), 409

    u = User(
        username=username,
        email=email,
        password_hash=generate_password_hash(password),
        membership_type=membership_type,
    )
    db.session.add(u)
    db.session.commit()
    login_user(u, remember=True)
    u.last_login_at = utcnow()
    db.session.commit()
    return jsonify(serialize_user(u)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not EMAIL_RE.match(email):
        return jsonify(error="invalid_request", message="Invalid email."), 400

    u = User.query.filter_by(email=email).first()
    if not u or not isinstance(password, str) or not check_password_hash(u.password_hash, password):
        return jsonify(error="invalid_credentials", message="Wrong email or password."), 401

    login_user(u, remember=True)
    u.last_login_at = utcnow()
    db.session.commit()
    return jsonify(serialize_user(u)), 200


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(serialize_user(current_user)), 200


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify(ok=True), 200
