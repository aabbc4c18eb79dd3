"""Tests for the HTTP surface."""

from fastapi.testclient import TestClient

from dish_nutrition.api.app import create_app
from dish_nutrition.config import Settings
from dish_nutrition.containers import build_container


def _client(settings: Settings) -> TestClient:
    return TestClient(create_app(build_container(settings)))


def test_health(settings: Settings) -> None:
    with _client(settings) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_estimate_returns_per_serving_nutrition(settings: Settings) -> None:
    payload = {
        "name": "Jeera Aloo",
        "dishType": "main_course",
        "ingredients": [
            {"name": "potatoes", "quantity": "4 medium"},
            {"name": "jeera", "quantity": "1 tsp"},
            {"name": "oil", "quantity": "2 tbsp"},
            {"name": "unicorn dust", "quantity": "a pinch"},
        ],
    }

    with _client(settings) as client:
        response = client.post("/estimate", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["dish_name"] == "Jeera Aloo"
    assert body["serving_size"] == {"household_measure": "1 katori", "grams": 200.0}
    assert body["totals"]["total_weight_grams"] == 600 + 3 + 28
    ingredients = body["ingredients_used"]
    assert [item["mapped_name"] for item in ingredients] == [
        "potato",
        "cumin_seeds",
        "oil",
        None,
    ]
    assert ingredients[3]["nutrition"] is None
    assert ingredients[3]["error"]
    per_serving = body["estimated_nutrition_per_serving"]
    assert 0 < per_serving["calories"] <= 1000


def test_estimate_with_explicit_serving_grams(settings: Settings) -> None:
    payload = {
        "name": "Ghee Rice",
        "ingredients": [{"name": "ghee", "quantity": "100 g"}],
    }

    with _client(settings) as client:
        response = client.post("/estimate", params={"serving_grams": 10}, json=payload)

    body = response.json()
    assert body["serving_size"] == {"household_measure": "10 g", "grams": 10.0}
    assert body["estimated_nutrition_per_serving"]["calories"] == 90


def test_estimate_rejects_empty_ingredients(settings: Settings) -> None:
    with _client(settings) as client:
        response = client.post("/estimate", json={"name": "Nothing", "ingredients": []})

    assert response.status_code == 422
