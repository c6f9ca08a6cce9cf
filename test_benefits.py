import pytest
from datetime import datetime, timedelta, timezone

from app.services.entitlement import Entitlement


@pytest.mark.parametrize("required,plan,expected", [
    ("basic", "basic", True),
    ("basic", "vip", True),
    ("vip", "vip", True),
    ("vip", "basic", False),
])
def test_can_access(required, plan, expected):
    assert Entitlement.can_access(required, plan) is expected


def test_create_benefit(client):
    response = client.post("/benefits", json={
        "title": "Cinema",
        "description": "Half-price tickets",
        "category": "entretenimento",
        "discount_percentage": 50,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["plan_required"] == "basic"
    assert data["is_active"] is True
    assert data["discount_percentage"] == 50


def test_create_benefit_rejects_invalid_values(client):
    base = {"title": "X", "description": "Y", "category": "viagem"}
    assert client.post("/benefits", json={**base, "category": "pets"}).status_code == 422
    assert client.post("/benefits", json={**base, "discount_percentage": -5}).status_code == 422
    assert client.post("/benefits", json={**base, "discount_percentage": 120}).status_code == 422
    assert client.post("/benefits", json={**base, "original_price": -1}).status_code == 422
    assert client.post("/benefits", json={"title": "X", "category": "viagem"}).status_code == 422


def test_list_benefits_filters(client, make_benefit):
    make_benefit(title="Pizza")
    make_benefit(title="Trip", category="viagem", plan_required="vip")
    make_benefit(title="Old", is_active=False)

    titles = [b["title"] for b in client.get("/benefits").json()]
    assert titles == ["Old", "Trip", "Pizza"]

    active = client.get("/benefits", params={"is_active": True}).json()
    assert {b["title"] for b in active} == {"Pizza", "Trip"}

    travel = client.get("/benefits", params={"category": "viagem"}).json()
    assert [b["title"] for b in travel] == ["Trip"]

    vip = client.get("/benefits", params={"plan_required": "vip", "is_active": True}).json()
    assert [b["title"] for b in vip] == ["Trip"]


def test_update_benefit(client, make_benefit):
    benefit = make_benefit()
    response = client.put(f"/benefits/{benefit['id']}", json={"is_active": False, "title": None})
    assert response.status_code == 200
    data = response.json()
    assert data["is_active"] is False
    assert data["title"] == benefit["title"]


def test_update_missing_benefit(client):
    assert client.put("/benefits/missing", json={"title": "X"}).status_code == 404


def test_delete_benefit_without_redemptions(client, make_benefit):
    benefit = make_benefit()
    assert client.delete(f"/benefits/{benefit['id']}").status_code == 204
    assert client.get(f"/benefits/{benefit['id']}").status_code == 404


def test_delete_benefit_with_redemptions_is_blocked(client, make_benefit, make_profile):
    make_profile()
    benefit = make_benefit()
    client.post("/users/user-1/redemptions", json={"benefit_id": benefit["id"]})

    response = client.delete(f"/benefits/{benefit['id']}")
    assert response.status_code == 409
    assert "deactivate" in response.json()["error"]["detail"]
    assert client.get(f"/benefits/{benefit['id']}").status_code == 200


def test_member_catalog_flags_access(client, make_benefit, make_profile):
    make_profile(plan="basic")
    make_benefit(title="Pizza")
    make_benefit(title="Lounge", category="viagem", plan_required="vip")
    make_benefit(title="Hidden", is_active=False)

    response = client.get("/users/user-1/benefits")
    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "basic"
    access = {b["title"]: b["can_access"] for b in data["benefits"]}
    assert access == {"Pizza": True, "Lounge": False}

    travel = client.get("/users/user-1/benefits", params={"category": "viagem"}).json()
    assert [b["title"] for b in travel["benefits"]] == ["Lounge"]


def test_member_catalog_unknown_user(client):
    response = client.get("/users/nobody/benefits")
    assert response.status_code == 404
    assert response.json()["error"]["detail"] == "Profile not found"


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_member_catalog_hides_lapsed_benefits(client, make_benefit, make_profile):
    make_profile()
    yesterday = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    next_week = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()
    make_benefit(title="Lapsed", valid_until=yesterday)
    make_benefit(title="Current", valid_until=next_week)
    make_benefit(title="Open-ended")

    titles = [b["title"] for b in client.get("/users/user-1/benefits").json()["benefits"]]
    assert titles == ["Open-ended", "Current"]


def test_member_catalog_paging(client, make_benefit, make_profile):
    make_profile()
    for i in range(3):
        make_benefit(title=f"Offer {i}")

    first = client.get("/users/user-1/benefits", params={"limit": 2}).json()["benefits"]
    rest = client.get("/users/user-1/benefits", params={"skip": 2, "limit": 2}).json()["benefits"]
    assert [b["title"] for b in first] == ["Offer 2", "Offer 1"]
    assert [b["title"] for b in rest] == ["Offer 0"]


def test_paging_params_are_validated(client, make_profile):
    make_profile()
    assert client.get("/benefits", params={"skip": -1}).status_code == 422
    assert client.get("/benefits", params={"limit": 0}).status_code == 422
    assert client.get("/benefits", params={"limit": 501}).status_code == 422
    assert client.get("/redemptions", params={"skip": -1}).status_code == 422
    assert client.get("/users/user-1/benefits", params={"skip": -1}).status_code == 422
