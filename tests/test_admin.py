"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from calorie_tracker.api.app import create_app

ADMIN = {"X-Admin-Token": "admin-token"}


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/admin/health").status_code == 401
    assert (
        client.get("/admin/health", headers={"X-Admin-Token": "wrong"}).status_code
        == 401
    )
    assert client.get("/admin/health", headers=ADMIN).json() == {"status": "ok"}


def test_admin_seed_replaces_catalog(container, food_repository) -> None:
    old = food_repository.add("old food", 10)
    kept = food_repository.add("rice", 120)
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/foods/seed",
        json={
            "foods": [
                {"name": "Rice", "calories": 130, "carbohydrates": 28},
                {"name": "Dal", "calories": 116, "protein": 9, "region": "India"},
            ]
        },
        headers=ADMIN,
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "imported": 2}
    assert food_repository.get_by_name(old.name) is None
    rice = food_repository.get_by_name("rice")
    assert rice.id == kept.id
    assert rice.macros.calories == 130
    assert food_repository.get_by_name("dal").region == "India"


def test_admin_seed_validates_payload(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/foods/seed",
        json={"foods": [{"name": "Rice", "calories": -5}]},
        headers=ADMIN,
    )

    assert response.status_code == 422
