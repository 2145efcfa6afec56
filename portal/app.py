# portal/app.py
"""
Menu extraction portal: thin JSON API over the layout engine.

Routes:
  GET  /health            liveness probe (routes/core.py)
  POST /api/menu/items    fragments/pages -> menu items
  POST /api/price         free text -> detected price

All clustering rules live in menucluster.*; this module only validates
request shape and serializes results.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from menucluster import settings
from menucluster.contracts import pages_from_payload, tolerances_from_payload
from menucluster.layout.cluster_assembler import ClusterAssembler, extract_menu_items
from menucluster.parsers.price_parser import detect_price
from routes.core import core_bp

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# ------------------------
# App & Config
# ------------------------
app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = settings.MAX_CONTENT_LENGTH

app.register_blueprint(core_bp)


def _json_body() -> Any:
    return request.get_json(silent=True)


def _bad_request(message: str):
    return jsonify({"error": message}), 400


@app.errorhandler(RequestEntityTooLarge)
def _too_large(_e):
    return jsonify({"error": "Payload too large. Raise MENUCLUSTER_MAX_CONTENT_LENGTH or split the pages."}), 413


# ------------------------
# JSON API
# ------------------------
@app.post("/api/menu/items")
def menu_items():
    payload = _json_body()
    if payload is None:
        return _bad_request("Request body must be JSON")
    if not isinstance(payload, dict):
        return _bad_request("Request body must be a JSON object")

    pages, err = pages_from_payload(payload)
    if err:
        return _bad_request(f"Validation failed: {err}")
    tolerances, err = tolerances_from_payload(payload)
    if err:
        return _bad_request(f"Validation failed: {err}")

    assembler = ClusterAssembler(**tolerances)
    include_raw = payload.get("include_raw") is True
    result = extract_menu_items(pages, include_raw=include_raw, assembler=assembler)

    body: Dict[str, Any]
    if include_raw:
        items, raw = result
        body = {"items": items, "count": len(items), "raw": raw}
    else:
        body = {"items": result, "count": len(result)}
    return jsonify(body)


@app.post("/api/price")
def price():
    payload = _json_body()
    if not isinstance(payload, dict):
        return _bad_request("Request body must be a JSON object")
    text = payload.get("text")
    if not isinstance(text, str):
        return _bad_request("Validation failed: text must be a string")

    found = detect_price(text)
    if found is None:
        return jsonify({"price": None, "kind": None})
    return jsonify({"price": found.value, "kind": found.kind})


if __name__ == "__main__":
    app.run(debug=False)
