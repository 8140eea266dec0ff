from flask import Blueprint, current_app, request, jsonify

from kindkart.errors import ValidationError
from kindkart.services.user_service import (
    get_profile,
    parse_user_id,
    update_user_profile,
)
from kindkart.utils.db import get_db

user = Blueprint("user", __name__)

PROFILE_HELP = (
    "Call /api/users/:id/profile OR /api/users/profile?id=123 "
    "OR set header x-user-id:123"
)


@user.get("/<int:user_id>/profile")
def fetch_profile(user_id):
    return jsonify(get_profile(get_db(), user_id)), 200


# Older front-ends send the id as ?id= or an X-User-Id header.
@user.get("/profile")
def fetch_profile_compat():
    raw = request.args.get("id") or request.headers.get("X-User-Id")
    if not raw:
        raise ValidationError(
            "Missing user id",
            help=PROFILE_HELP,
            requested=request.full_path.rstrip("?"),
        )
    return jsonify(get_profile(get_db(), parse_user_id(raw))), 200


# PUT /api/users/<id>/profile  multipart: name, email, phone?, photo?  (or JSON without photo)
@user.put("/<int:user_id>/profile")
def edit_profile(user_id):
    if request.mimetype == "multipart/form-data" or request.form:
        data = request.form
    else:
        data = request.get_json(force=True, silent=True) or {}
    resp = update_user_profile(
        get_db(),
        user_id,
        data,
        request.files.get("photo"),
        upload_dir=current_app.config["UPLOAD_DIR"],
        max_photo_bytes=current_app.config["MAX_PHOTO_BYTES"],
    )
    return jsonify(resp), 200
