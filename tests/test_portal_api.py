# tests/test_portal_api.py
"""
Portal JSON API tests.

Covers:
  - GET /health
  - POST /api/menu/items: single page, multi page, raw echo, tolerance
    overrides, non-JSON body, wrong top-level shape, fragment validation
  - POST /api/price: detected price + rule kind, no price, bad payload
  - contracts helpers used by the routes
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from menucluster.contracts import (
    pages_from_payload,
    tolerances_from_payload,
    validate_fragment,
)


def _raw(text, x=0.0, y=100.0, width=20.0, size=10.0, font="F1"):
    return {"str": text, "transform": [size, 0, 0, size, x, y], "width": width, "fontName": font}


DISH_AND_PRICE = [
    _raw("Fish & Chips", x=10, y=100, width=60),
    _raw("£12.50", x=300, y=90, width=30),
]


# ---------------------------------------------------------------------------
# Flask test client fixture
# ---------------------------------------------------------------------------
@pytest.fixture()
def client():
    from portal.app import app
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


# ===========================================================================
# SECTION 1: Health
# ===========================================================================

class TestHealth:
    def test_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "ok"
        assert body["time"].endswith("Z")


# ===========================================================================
# SECTION 2: /api/menu/items
# ===========================================================================

class TestMenuItems:
    def test_fragments(self, client):
        resp = client.post("/api/menu/items", json={"fragments": DISH_AND_PRICE})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["count"] == 1
        assert body["items"] == [{"title": "Fish & Chips £12.50", "price": 12.5}]
        assert "raw" not in body

    def test_pages(self, client):
        resp = client.post("/api/menu/items", json={"pages": [DISH_AND_PRICE[:1], DISH_AND_PRICE[1:]]})
        assert resp.status_code == 200
        assert resp.get_json()["items"][0]["price"] == 12.5

    def test_include_raw(self, client):
        resp = client.post("/api/menu/items", json={"fragments": DISH_AND_PRICE, "include_raw": True})
        body = resp.get_json()
        assert body["raw"] == DISH_AND_PRICE

    def test_include_raw_needs_true(self, client):
        resp = client.post("/api/menu/items", json={"fragments": DISH_AND_PRICE, "include_raw": "false"})
        assert resp.status_code == 200
        assert "raw" not in resp.get_json()

    def test_overlong_number_stays_valid_json(self, client):
        frags = [_raw("Burger " + "9" * 400, x=10, width=60)]
        resp = client.post("/api/menu/items", json={"fragments": frags})
        assert resp.status_code == 200
        body = json.loads(resp.data)
        assert body["items"][0]["price"] is None

    def test_empty_fragments(self, client):
        resp = client.post("/api/menu/items", json={"fragments": []})
        assert resp.status_code == 200
        assert resp.get_json() == {"items": [], "count": 0}

    def test_tolerance_override(self, client):
        frags = [_raw("Fish", x=10, width=20), _raw("&Chips", x=35, width=30)]
        resp = client.post("/api/menu/items", json={"fragments": frags, "letter_gap_tolerance": 10})
        assert resp.get_json()["items"][0]["title"] == "Fish&Chips"

    def test_non_json_400(self, client):
        resp = client.post("/api/menu/items", data="not json")
        assert resp.status_code == 400
        assert "JSON" in resp.get_json()["error"]

    def test_list_body_400(self, client):
        resp = client.post("/api/menu/items", json=DISH_AND_PRICE)
        assert resp.status_code == 400

    def test_missing_key_400(self, client):
        resp = client.post("/api/menu/items", json={"items": []})
        assert resp.status_code == 400
        assert "Validation" in resp.get_json()["error"]

    def test_bad_transform_400(self, client):
        resp = client.post("/api/menu/items", json={"fragments": [{"str": "Soup", "transform": [1, 2]}]})
        assert resp.status_code == 400
        assert "fragments[0].transform" in resp.get_json()["error"]

    def test_bad_tolerance_400(self, client):
        resp = client.post("/api/menu/items", json={"fragments": [], "same_line_tolerance": "wide"})
        assert resp.status_code == 400
        assert "same_line_tolerance" in resp.get_json()["error"]

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_tolerance_400(self, client, value):
        resp = client.post("/api/menu/items", json={"fragments": DISH_AND_PRICE, "letter_gap_tolerance": value})
        assert resp.status_code == 400
        assert "letter_gap_tolerance" in resp.get_json()["error"]


# ===========================================================================
# SECTION 3: /api/price
# ===========================================================================

class TestPriceEndpoint:
    def test_currency(self, client):
        resp = client.post("/api/price", json={"text": "$12.34"})
        assert resp.get_json() == {"price": 12.34, "kind": "currency"}

    def test_deal(self, client):
        resp = client.post("/api/price", json={"text": "2 for 1"})
        assert resp.get_json() == {"price": 1.0, "kind": "deal"}

    def test_no_price(self, client):
        resp = client.post("/api/price", json={"text": "600g"})
        assert resp.get_json() == {"price": None, "kind": None}

    def test_overlong_number(self, client):
        resp = client.post("/api/price", json={"text": "9" * 400})
        assert json.loads(resp.data) == {"price": None, "kind": None}

    def test_missing_text_400(self, client):
        resp = client.post("/api/price", json={"txt": "$1"})
        assert resp.status_code == 400


# ===========================================================================
# SECTION 4: Contracts
# ===========================================================================

class TestContracts:
    def test_valid_fragment(self):
        assert validate_fragment(_raw("Soup"), "f") == (True, "")

    def test_minimal_fragment(self):
        assert validate_fragment({"str": "Soup"}, "f") == (True, "")

    @pytest.mark.parametrize("frag,needle", [
        ("Soup", "must be an object"),
        ({"str": 5}, "f.str"),
        ({"transform": "1 0 0 1 0 0"}, "f.transform"),
        ({"transform": [1, 0, 0, 1, 0, "y"]}, "f.transform"),
        ({"width": "wide"}, "f.width"),
        ({"width": True}, "f.width"),
        ({"fontName": 7}, "f.fontName"),
    ])
    def test_invalid_fragment(self, frag, needle):
        ok, err = validate_fragment(frag, "f")
        assert not ok
        assert needle in err

    def test_pages_wrap_single_list(self):
        pages, err = pages_from_payload({"fragments": [_raw("Soup")]})
        assert err == ""
        assert pages == [[_raw("Soup")]]

    def test_pages_must_be_list(self):
        pages, err = pages_from_payload({"pages": {"0": []}})
        assert pages == []
        assert err == "pages must be a list"

    def test_pages_error_names_page(self):
        _, err = pages_from_payload({"pages": [[], [{"str": 1}]]})
        assert err.startswith("pages[1][0]")

    def test_tolerances(self):
        assert tolerances_from_payload({}) == (
            {"same_line_tolerance": None, "letter_gap_tolerance": None}, "",
        )
        out, err = tolerances_from_payload({"letter_gap_tolerance": "2"})
        assert err == "" and out["letter_gap_tolerance"] == 2.0
        _, err = tolerances_from_payload({"same_line_tolerance": -1})
        assert "non-negative" in err

    @pytest.mark.parametrize("value", ["nan", "inf", float("inf"), float("nan")])
    def test_tolerances_reject_non_finite(self, value):
        out, err = tolerances_from_payload({"same_line_tolerance": value})
        assert out == {}
        assert "finite" in err
