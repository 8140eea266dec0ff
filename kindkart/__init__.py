# kindkart/__init__.py
import logging
import os
from datetime import timedelta
from pathlib import Path

import psycopg2
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from kindkart.errors import APIError, DatabaseError, UnhandledError, UploadError
from kindkart.routes import auth_bp, contact_bp, core, donations_bp, user
from kindkart.utils.db import database_settings, init_db
from kindkart.utils.media_validators import MAX_PHOTO_SIZE

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent

# multipart overhead allowed on top of the photo itself
FORM_OVERHEAD_BYTES = 1024 * 1024


def _csv(raw: str):
    raw = (raw or "").strip()
    return "*" if raw in ("", "*") else [o.strip() for o in raw.split(",") if o.strip()]


def create_app(test_config=None, db_pool=None):
    app = Flask(__name__)
    app.url_map.strict_slashes = False

    app.config.from_mapping(
        DB_SETTINGS=database_settings(),
        DB_POOL_MIN=int(os.getenv("DB_POOL_MIN", "1")),
        DB_POOL_MAX=int(os.getenv("DB_POOL_MAX", "10")),
        UPLOAD_DIR=os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads")),
        MAX_PHOTO_BYTES=int(os.getenv("MAX_PHOTO_BYTES", str(MAX_PHOTO_SIZE))),
        CORS_ORIGINS=_csv(os.getenv("CORS_ORIGINS", "*")),
        RATE_LIMIT_ENABLED=os.getenv("RATE_LIMIT_ENABLED", "1") == "1",
        RATE_LIMIT_AUTH_PER_MINUTE=int(os.getenv("RATE_LIMIT_AUTH_PER_MINUTE", "10")),
        RATE_LIMIT_FORMS_PER_MINUTE=int(os.getenv("RATE_LIMIT_FORMS_PER_MINUTE", "5")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        # JWT
        JWT_SECRET_KEY=os.getenv("JWT_SECRET", "dev-secret"),
        JWT_TOKEN_LOCATION=["headers"],
        JWT_HEADER_NAME="Authorization",
        JWT_HEADER_TYPE="Bearer",
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=15),
        JWT_REFRESH_TOKEN_EXPIRES=timedelta(days=30),
    )
    if test_config:
        app.config.update(test_config)
    if app.config.get("MAX_CONTENT_LENGTH") is None:
        app.config["MAX_CONTENT_LENGTH"] = (
            app.config["MAX_PHOTO_BYTES"] + FORM_OVERHEAD_BYTES
        )

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    JWTManager(app)
    CORS(app, origins=app.config["CORS_ORIGINS"], send_wildcard=True)
    init_db(app, db_pool)

    @app.before_request
    def _dbg_request():
        logger.debug("%s %s", request.method, request.path)

    register_error_handlers(app)

    app.register_blueprint(core)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(user, url_prefix="/api/users")
    app.register_blueprint(donations_bp)
    app.register_blueprint(contact_bp)

    for rule in app.url_map.iter_rules():
        logger.debug("%-50s | endpoint=%s", rule, rule.endpoint)

    return app


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error("%s %s -> %s", request.method, request.path, e.message)
        elif e.status_code == 404:
            logger.warning("%s %s -> %s", request.method, request.path, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 413:
            limit_mb = app.config["MAX_PHOTO_BYTES"] // (1024 * 1024)
            err = UploadError(f"File too large (max {limit_mb}MB)")
            return jsonify(err.to_dict()), err.status_code
        if e.code == 404 and request.path.startswith("/api"):
            logger.warning("Unmatched API request: %s %s", request.method, request.full_path)
            return (
                jsonify(
                    {
                        "error": "API endpoint not found",
                        "requested": request.full_path.rstrip("?"),
                    }
                ),
                404,
            )
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(psycopg2.Error)
    def handle_db_error(e):
        logger.exception("unhandled database error")
        err = DatabaseError()
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        err = UnhandledError()
        return jsonify(err.to_dict()), err.status_code
