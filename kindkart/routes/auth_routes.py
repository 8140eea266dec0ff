from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, create_access_token

from kindkart.services.auth_service import login_user, signup_user
from kindkart.utils.db import get_db
from kindkart.utils.rate_limit import rate_limited

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/signup")
@rate_limited("RATE_LIMIT_AUTH_PER_MINUTE", "auth")
def signup():
    data = request.get_json(force=True, silent=True) or {}
    return jsonify(signup_user(get_db(), data)), 200


@auth_bp.post("/login")
@rate_limited("RATE_LIMIT_AUTH_PER_MINUTE", "auth")
def login():
    data = request.get_json(force=True, silent=True) or {}
    return jsonify(login_user(get_db(), data)), 200


@auth_bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    user_id = get_jwt_identity()
    new_access = create_access_token(identity=user_id)
    return jsonify({"access_token": new_access}), 200
