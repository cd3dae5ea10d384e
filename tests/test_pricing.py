"""Tests for the selling-price calculator."""

import pytest

from backoffice.services.pricing import markup_pct, profit_margin_pct, quote, suggested_price


def test_suggested_price_is_cost_times_markup():
    assert suggested_price(10, 2.5) == 25


def test_margin_and_markup():
    assert profit_margin_pct(25, 10) == pytest.approx(60)
    assert markup_pct(25, 10) == pytest.approx(150)


def test_zero_denominators():
    assert profit_margin_pct(0, 10) == 0
    assert markup_pct(25, 0) == 0


class TestQuote:
    def test_default_markup(self):
        result = quote(4.0)

        assert result.markup_factor == 2.5
        assert result.suggested_price == 10.0
        assert result.final_price == 10.0
        assert result.profit_margin_pct == 60.0
        assert not result.low_margin

    def test_non_positive_markup_uses_default(self):
        assert quote(4.0, markup_factor=0).markup_factor == 2.5
        assert quote(4.0, markup_factor=-1).markup_factor == 2.5

    def test_custom_sell_price_flags_low_margin(self):
        result = quote(8.0, markup_factor=3, sell_price=10)

        assert result.suggested_price == 24.0
        assert result.final_price == 10
        assert result.profit_margin_pct == 20.0
        assert result.markup_pct == 25.0
        assert result.low_margin

    def test_values_are_rounded(self):
        result = quote(1.23456, markup_factor=3)

        assert result.cost == 1.23
        assert result.suggested_price == 3.7


def test_quote_endpoint(client, auth_headers, flour):
    recipe = client.post(
        "/api/v1/recipes",
        headers=auth_headers,
        json={
            "name": "Pizza Dough",
            "ingredients": [{"stock_item_id": flour["id"], "quantity": 1, "unit": "kg"}],
        },
    ).json()

    response = client.post(
        "/api/v1/pricing/quote",
        headers=auth_headers,
        json={"recipe_id": recipe["id"], "markup_factor": 2, "log_decision": True},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["recipe_name"] == "Pizza Dough"
    assert data["cost"] == 1.1
    assert data["suggested_price"] == 2.2
    assert data["profit_margin_pct"] == 50.0

    logs = client.get("/api/v1/audit", headers=auth_headers).json()
    assert any(log["action"] == "Pricing decision for Pizza Dough" for log in logs)


def test_quote_unknown_recipe(client, auth_headers):
    response = client.post("/api/v1/pricing/quote", headers=auth_headers, json={"recipe_id": 999})
    assert response.status_code == 404
