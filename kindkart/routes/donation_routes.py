from flask import Blueprint, request, jsonify

from kindkart.services.donation_service import (
    checkout,
    donation_details,
    donation_summary,
    process_payment,
    remove_donation,
)
from kindkart.utils.db import get_db

donations_bp = Blueprint("donations", __name__)


# POST /api/payments/process  { amount, paymentMethod, currency?, description?, donorInfo }
@donations_bp.post("/api/payments/process")
def process():
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(process_payment(get_db(), body)), 200


# POST /api/checkout  { userId?, items[], amount, paymentMethod?, currency?, description? }
@donations_bp.post("/api/checkout")
def cart_checkout():
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(checkout(get_db(), body)), 200


@donations_bp.get("/api/users/<int:user_id>/donations/summary")
def summary(user_id):
    return jsonify(donation_summary(get_db(), user_id)), 200


@donations_bp.get("/api/donations/<int:donation_id>/details")
def details(donation_id):
    return jsonify(donation_details(get_db(), donation_id)), 200


@donations_bp.delete("/api/donations/<int:donation_id>")
def delete(donation_id):
    return jsonify(remove_donation(get_db(), donation_id)), 200
