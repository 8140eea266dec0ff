"""
Contact and feedback forms: validated and stored; rate limited per client.
"""

from flask import Blueprint, request, jsonify

from kindkart.services.contact_service import submit_contact, submit_feedback
from kindkart.utils.db import get_db
from kindkart.utils.rate_limit import rate_limited

contact_bp = Blueprint("contact", __name__)


@contact_bp.post("/api/contact")
@rate_limited("RATE_LIMIT_FORMS_PER_MINUTE", "contact")
def contact():
    data = request.get_json(force=True, silent=True) or {}
    return jsonify(submit_contact(get_db(), data)), 200


@contact_bp.post("/api/feedback")
@rate_limited("RATE_LIMIT_FORMS_PER_MINUTE", "feedback")
def feedback():
    data = request.get_json(force=True, silent=True) or {}
    return jsonify(submit_feedback(get_db(), data)), 200
