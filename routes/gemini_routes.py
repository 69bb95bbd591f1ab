from flask import Blueprint, current_app, jsonify, request

from extensions import limiter
from utils import json_errors
from utils.assistant import GREETING, ask
from utils.store import load_snapshot

gemini_bp = Blueprint("gemini", __name__, url_prefix="/gemini")


def _rate_limit():
    return current_app.config.get("ASSISTANT_RATE_LIMIT", "20 per minute")


@gemini_bp.route("/greeting")
def gemini_greeting():
    return jsonify({"reply": GREETING})


@gemini_bp.route("/chat", methods=["POST"])
@limiter.limit(_rate_limit)
@json_errors
def gemini_chat():
    data = request.get_json(silent=True) or {}
    user_input = (data.get("message") or "").strip()
    if not user_input:
        return jsonify({"error": "Message is required"}), 400
    return jsonify({"reply": ask(user_input, load_snapshot())})
