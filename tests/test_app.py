"""HTTP API behaviour through the ASGI app."""

import httpx
import pytest

from propertypulse_backend.main import create_app
from propertypulse_backend.modules.auth.jwt_service import create_access_token


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api") as client:
        yield client


async def make_user(app, role: str, email: str) -> tuple[str, dict]:
    user = await app.state.factory.users().create(
        {"email": email, "first_name": role.title(), "last_name": "User", "role": role}
    )
    token = create_access_token(user.id, user.email, role, app.state.settings)
    return user.id, {"Authorization": f"Bearer {token}"}


async def register_and_login(client, email: str, role: str = "TENANT") -> dict:
    response = await client.post(
        "/auth/register",
        json={
            "email": email,
            "password": "correct-horse",
            "first_name": "Sam",
            "last_name": "Sample",
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        "/auth/login", json={"email": email, "password": "correct-horse"}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}


PROPERTY = {
    "title": "Loft near the river",
    "address_street": "9 River Rd",
    "address_city": "Austin",
    "address_state": "TX",
    "address_zip": "73301",
    "bedrooms": 2,
    "bathrooms": "1.0",
    "rent_amount": "1400.00",
    "amenities": ["parking"],
}


async def test_register_login_and_me(client):
    headers = await register_and_login(client, "sam@example.com")

    response = await client.get("/auth/me", headers=headers)
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["email"] == "sam@example.com"
    assert body["data"]["role"] == "TENANT"
    assert "password_hash" not in body["data"]
    assert response.headers["x-transaction-id"]


async def test_login_with_wrong_password(client):
    await register_and_login(client, "sam@example.com")
    response = await client.post(
        "/auth/login", json={"email": "sam@example.com", "password": "nope-nope"}
    )
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Invalid email or password",
        "error": "Invalid email or password",
        "data": None,
    }


async def test_register_rejects_admin_role_and_duplicates(client):
    response = await client.post(
        "/auth/register",
        json={
            "email": "boss@example.com",
            "password": "correct-horse",
            "first_name": "B",
            "last_name": "Oss",
            "role": "ADMIN",
        },
    )
    assert response.status_code == 403

    await register_and_login(client, "dup@example.com")
    response = await client.post(
        "/auth/register",
        json={
            "email": "DUP@example.com",
            "password": "correct-horse",
            "first_name": "D",
            "last_name": "Up",
        },
    )
    assert response.status_code == 409
    assert response.json()["success"] is False


async def test_missing_token_is_401_envelope(client):
    response = await client.get("/properties")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Authentication required"


async def test_invalid_token_is_rejected(client):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


async def test_landlord_creates_and_lists_property(client):
    headers = await register_and_login(client, "lee@example.com", role="LANDLORD")

    response = await client.post("/properties", json=PROPERTY, headers=headers)
    assert response.status_code == 201, response.text
    created = response.json()["data"]
    assert created["rent_amount"] in ("1400.00", "1400.0", 1400.0)
    assert created["landlord"]["email"] == "lee@example.com"

    response = await client.get(
        "/properties", params={"city": "aus", "max_rent": 2000}, headers=headers
    )
    page = response.json()["data"]
    assert page["total"] == 1
    assert page["page"] == 1
    assert page["items"][0]["id"] == created["id"]


async def test_tenant_cannot_create_property(client):
    headers = await register_and_login(client, "tess@example.com")
    response = await client.post("/properties", json=PROPERTY, headers=headers)
    assert response.status_code == 403
    assert response.json()["success"] is False


async def test_landlord_cannot_edit_someone_elses_property(client):
    owner = await register_and_login(client, "owner@example.com", role="LANDLORD")
    other = await register_and_login(client, "other@example.com", role="LANDLORD")
    created = (await client.post("/properties", json=PROPERTY, headers=owner)).json()["data"]

    response = await client.patch(
        f"/properties/{created['id']}", json={"title": "Mine now"}, headers=other
    )
    assert response.status_code == 403


async def test_missing_record_is_404_envelope(client):
    headers = await register_and_login(client, "sam@example.com")
    response = await client.get("/properties/does-not-exist", headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Property with ID does-not-exist not found"


async def test_request_validation_is_400_envelope(client):
    headers = await register_and_login(client, "lee@example.com", role="LANDLORD")
    response = await client.post(
        "/properties", json={**PROPERTY, "rent_amount": "-5"}, headers=headers
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "rent_amount" in body["message"]
    assert body["data"]["errors"][0]["loc"][-1] == "rent_amount"


async def test_bad_pagination_is_400(client):
    headers = await register_and_login(client, "sam@example.com")
    response = await client.get("/properties", params={"limit": 500}, headers=headers)
    assert response.status_code == 400


async def test_admin_switches_database(app, client):
    _, admin = await make_user(app, "ADMIN", "admin@example.com")

    response = await client.get("/admin/database/info", headers=admin)
    assert response.json()["data"]["active_target"] == "postgres"

    response = await client.post(
        "/admin/database/switch", json={"target": "json"}, headers=admin
    )
    assert response.status_code == 200
    assert response.json()["data"]["current_target"] == "json"
    assert app.state.factory.active_target.value == "json"

    response = await client.post(
        "/admin/database/switch", json={"target": "oracle"}, headers=admin
    )
    assert response.status_code == 400

    response = await client.get("/admin/database/health-history", headers=admin)
    assert response.json()["data"]["history"] == []


async def test_non_admin_cannot_switch(client):
    headers = await register_and_login(client, "lee@example.com", role="LANDLORD")
    response = await client.post(
        "/admin/database/switch", json={"target": "json"}, headers=headers
    )
    assert response.status_code == 403


async def test_health_endpoint(client):
    response = await client.get("/health")
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["status"] == "healthy"
    assert body["data"]["targets"]["json"]["status"] == "healthy"


async def test_transaction_id_is_echoed(client):
    response = await client.get("/health", headers={"x-transaction-id": "abc12345"})
    assert response.headers["x-transaction-id"] == "abc12345"


async def test_matching_flow(app, client):
    landlord_id, landlord = await make_user(app, "LANDLORD", "lee@example.com")
    near = (await client.post("/properties", json=PROPERTY, headers=landlord)).json()["data"]
    far = (
        await client.post(
            "/properties",
            json={**PROPERTY, "address_city": "Houston", "rent_amount": "2600.00"},
            headers=landlord,
        )
    ).json()["data"]
    no_pets = (
        await client.post("/properties", json={**PROPERTY, "title": "No pets"}, headers=landlord)
    ).json()["data"]
    response = await client.put(
        f"/profiles/property/{no_pets['id']}", json={"pets_allowed": False}, headers=landlord
    )
    assert response.status_code == 200

    tenant = await register_and_login(client, "tia@example.com")
    response = await client.get("/matching/properties", headers=tenant)
    assert response.status_code == 404

    response = await client.put(
        "/profiles/tenant",
        json={
            "budget_min": "1000",
            "budget_max": "1500",
            "bedrooms_min": 2,
            "preferred_cities": ["Austin"],
            "amenities": ["parking"],
            "has_pets": True,
        },
        headers=tenant,
    )
    assert response.status_code == 200, response.text

    response = await client.get("/matching/properties", headers=tenant)
    matches = response.json()["data"]
    ids = [m["property"]["id"] for m in matches]
    assert ids == [near["id"], far["id"]]
    assert matches[0]["score"] == 100
    assert matches[0]["score"] > matches[1]["score"]
    assert "Located in Austin" in matches[0]["reasons"]

    response = await client.get(
        "/matching/properties", params={"min_score": 90}, headers=tenant
    )
    assert [m["property"]["id"] for m in response.json()["data"]] == [near["id"]]


async def test_lease_and_payment_visibility(app, client):
    _, landlord = await make_user(app, "LANDLORD", "lee@example.com")
    tenant_id, tenant = await make_user(app, "TENANT", "tia@example.com")
    _, stranger = await make_user(app, "TENANT", "sly@example.com")
    property_obj = (await client.post("/properties", json=PROPERTY, headers=landlord)).json()["data"]

    response = await client.post(
        "/leases",
        json={
            "property_id": property_obj["id"],
            "tenant_id": tenant_id,
            "start_date": "2026-01-01T00:00:00Z",
            "end_date": "2026-12-31T00:00:00Z",
            "monthly_rent": "1400.00",
        },
        headers=landlord,
    )
    assert response.status_code == 201, response.text
    lease = response.json()["data"]

    response = await client.post(
        "/payments",
        json={
            "lease_id": lease["id"],
            "tenant_id": tenant_id,
            "amount": "1400.00",
            "due_date": "2026-02-01T00:00:00Z",
        },
        headers=landlord,
    )
    assert response.status_code == 201, response.text
    payment = response.json()["data"]

    mine = (await client.get("/leases", headers=tenant)).json()["data"]
    assert [item["id"] for item in mine["items"]] == [lease["id"]]
    assert (await client.get(f"/payments/{payment['id']}", headers=tenant)).status_code == 200

    assert (await client.get(f"/leases/{lease['id']}", headers=stranger)).status_code == 403
    assert (await client.get(f"/payments/{payment['id']}", headers=stranger)).status_code == 403
    response = await client.get("/leases", params={"tenant_id": tenant_id}, headers=stranger)
    assert response.status_code == 403

    response = await client.patch(
        f"/payments/{payment['id']}", json={"status": "PAID"}, headers=landlord
    )
    assert response.json()["data"]["paid_date"] is not None

    response = await client.patch(
        f"/leases/{lease['id']}",
        json={"end_date": "2025-06-01T00:00:00Z"},
        headers=landlord,
    )
    assert response.status_code == 400
    assert "end_date" in response.json()["message"]


async def test_application_submit_and_review(app, client):
    _, landlord = await make_user(app, "LANDLORD", "lee@example.com")
    property_obj = (await client.post("/properties", json=PROPERTY, headers=landlord)).json()["data"]
    tenant = await register_and_login(client, "ada@example.com")

    response = await client.post(
        "/applications",
        json={
            "property_id": property_obj["id"],
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
        },
        headers=tenant,
    )
    assert response.status_code == 201, response.text
    application = response.json()["data"]
    assert application["status"] == "PENDING"

    response = await client.get(
        "/applications",
        params={"property_id": property_obj["id"], "search": "love"},
        headers=landlord,
    )
    assert response.json()["data"]["total"] == 1

    response = await client.post(
        f"/applications/{application['id']}/review", json={"status": "APPROVED"}, headers=tenant
    )
    assert response.status_code == 403

    response = await client.post(
        f"/applications/{application['id']}/review",
        json={"status": "APPROVED", "review_notes": "Welcome"},
        headers=landlord,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Application approved"

    response = await client.post(
        f"/applications/{application['id']}/review", json={"status": "DECLINED"}, headers=landlord
    )
    assert response.status_code == 400

    mine = (await client.get("/applications/mine", headers=tenant)).json()["data"]
    assert mine["items"][0]["reviewed_at"] is not None


async def test_only_property_side_changes_ticket_status(app, client):
    _, landlord = await make_user(app, "LANDLORD", "lee@example.com")
    _, tenant = await make_user(app, "TENANT", "tia@example.com")
    property_obj = (await client.post("/properties", json=PROPERTY, headers=landlord)).json()["data"]

    response = await client.post(
        "/maintenance",
        json={
            "property_id": property_obj["id"],
            "title": "Leaking tap",
            "description": "Kitchen tap drips",
        },
        headers=tenant,
    )
    assert response.status_code == 201, response.text
    ticket = response.json()["data"]

    response = await client.patch(
        f"/maintenance/{ticket['id']}", json={"status": "RESOLVED"}, headers=tenant
    )
    assert response.status_code == 403

    response = await client.patch(
        f"/maintenance/{ticket['id']}", json={"status": "IN_PROGRESS"}, headers=landlord
    )
    assert response.json()["data"]["status"] == "IN_PROGRESS"
