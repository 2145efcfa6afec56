# routes/core.py
from datetime import datetime, timezone

from flask import Blueprint, jsonify

core_bp = Blueprint("core", __name__)


@core_bp.get("/health")
def health():
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return jsonify({"status": "ok", "time": now.isoformat(timespec="seconds") + "Z"})
