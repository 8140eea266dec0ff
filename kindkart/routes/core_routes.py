from flask import Blueprint, current_app, jsonify, send_from_directory
from flask_jwt_extended import jwt_required, get_jwt_identity

core = Blueprint("core", __name__)


@core.get("/")
def root():
    return jsonify({"service": "kindkart-api", "ok": True})


@core.get("/api")
def api_index():
    return jsonify(
        {
            "endpoints": {
                "auth": ["/api/auth/signup (POST)", "/api/auth/login (POST)"],
                "donations": [
                    "/api/payments/process (POST)",
                    "/api/checkout (POST)",
                    "/api/users/:userId/donations/summary (GET)",
                    "/api/donations/:id/details (GET)",
                    "/api/donations/:id (DELETE)",
                ],
                "users": ["/api/users/:id/profile (GET, PUT)", "/api/users/profile (GET)"],
                "forms": ["/api/contact (POST)", "/api/feedback (POST)"],
            }
        }
    )


@core.get("/api/me")
@jwt_required()
def me():
    return jsonify({"user_id": get_jwt_identity()})


@core.get("/uploads/<path:name>")
def uploaded_file(name):
    return send_from_directory(current_app.config["UPLOAD_DIR"], name)
