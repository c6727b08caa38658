# idlerealms/__init__.py
import json
import logging
import os

from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import BadRequest

from .config import (
    DEFAULT_AFK_REWARD_CHANCE,
    DEFAULT_AFK_REWARD_ITEM_ID,
    DEFAULT_CHAT_HISTORY_LIMIT,
)
# Alias so the package attribute "db" keeps pointing at the submodule
from .db import db as SA_DB
from .errors import GameError

migrate = Migrate()

from .auth import auth_bp, login_manager
from .characters import characters_bp
from .api_catalog import bp as catalog_api_bp
from .api_inventory import bp as inventory_api_bp
from .api_afk import bp as afk_api_bp
from .api_market import bp as market_api_bp
from .api_chat import bp as chat_api_bp, socketio


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def create_app(config: dict | None = None):
    app = Flask(__name__)

    BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    DB_PATH = os.path.join(BASE_DIR, "idlerealms.db")
    DB_URI = os.environ.get("DATABASE_URL", f"sqlite:///{DB_PATH}")

    app.config.update(
        SECRET_KEY=os.environ.get("SECRET_KEY", "dev"),
        SQLALCHEMY_DATABASE_URI=DB_URI,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SESSION_COOKIE_SAMESITE="Lax",
        AUTO_CREATE_TABLES=_env_flag("AUTO_CREATE_TABLES", "1"),
        AFK_REWARD_CHANCE=float(os.environ.get("AFK_REWARD_CHANCE", DEFAULT_AFK_REWARD_CHANCE)),
        AFK_REWARD_ITEM_ID=os.environ.get("AFK_REWARD_ITEM_ID", DEFAULT_AFK_REWARD_ITEM_ID),
        AFK_REWARD_TABLES=json.loads(os.environ.get("AFK_REWARD_TABLES", "{}")),
        MARKET_DEBIT_SELLER_ON_PURCHASE=_env_flag("MARKET_DEBIT_SELLER_ON_PURCHASE", "0"),
        CHAT_HISTORY_LIMIT=int(os.environ.get("CHAT_HISTORY_LIMIT", DEFAULT_CHAT_HISTORY_LIMIT)),
    )
    if config:
        app.config.update(config)

    SA_DB.init_app(app)
    migrate.init_app(app, SA_DB)
    login_manager.init_app(app)
    socketio.init_app(app, cors_allowed_origins="*")

    app.logger.setLevel(logging.INFO)
    app.logger.info("DB URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])
    app.logger.info("AUTO_CREATE_TABLES=%s", app.config["AUTO_CREATE_TABLES"])

    with app.app_context():
        # Ensure all models are imported so metadata is complete
        from . import models as _models  # noqa: F401

        if app.config["AUTO_CREATE_TABLES"]:
            SA_DB.create_all()

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(characters_bp)
    app.register_blueprint(catalog_api_bp)
    app.register_blueprint(inventory_api_bp)
    app.register_blueprint(afk_api_bp)
    app.register_blueprint(market_api_bp)
    app.register_blueprint(chat_api_bp)

    @app.errorhandler(GameError)
    def handle_game_error(err: GameError):
        return jsonify(err.to_dict()), err.status

    @app.errorhandler(BadRequest)
    def handle_bad_request(err: BadRequest):
        return jsonify(error="invalid_request", message=err.description), 400

    @app.get("/api/healthcheck")
    def healthcheck():
        from .models.base import utcnow
        return jsonify(status="ok", timestamp=utcnow().isoformat())

    return app
