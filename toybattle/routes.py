# toybattle/routes.py
from flask import Blueprint, current_app, jsonify

battle_bp = Blueprint("battle", __name__, url_prefix="/battle")


@battle_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@battle_bp.route("/rooms")
def list_rooms():
    manager = current_app.extensions["toybattle"]
    return jsonify(manager.list_rooms())
