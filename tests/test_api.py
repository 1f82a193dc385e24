import pytest
from httpx import ASGITransport, AsyncClient

from marketplace.core.database import get_db
from marketplace.main import create_app

PASSWORD = "secret123"


@pytest.fixture
async def app(session_factory):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def register_and_login(client, username, user_type, name=None):
    response = await client.post("/auth/register", json={
        "username": username,
        "name": name or username.capitalize(),
        "email": f"{username}@example.com",
        "password": PASSWORD,
        "user_type": user_type,
    })
    assert response.status_code == 201, response.text
    token = (await client.post("/auth/token", data={"username": username, "password": PASSWORD})).json()
    return response.json(), {"Authorization": f"Bearer {token['access_token']}"}


async def make_freelancer(client, username, category, hourly_rate, name=None):
    user, headers = await register_and_login(client, username, "freelancer", name)
    response = await client.post("/freelancer-profile", headers=headers, json={
        "title": f"{category} freelancer",
        "category": category,
        "hourly_rate": hourly_rate,
        "skills": ["Figma"],
    })
    assert response.status_code == 200, response.text
    return user, headers, response.json()


async def test_register_rejects_weak_password_and_duplicates(client):
    response = await client.post("/auth/register", json={
        "username": "weak", "name": "Weak", "email": "weak@example.com",
        "password": "onlyletters", "user_type": "client",
    })
    assert response.status_code == 422

    await register_and_login(client, "alice", "client")
    response = await client.post("/auth/register", json={
        "username": "alice", "name": "Alice", "email": "other@example.com",
        "password": PASSWORD, "user_type": "client",
    })
    assert response.status_code == 400


async def test_login_with_wrong_password_fails(client):
    await register_and_login(client, "alice", "client")
    response = await client.post("/auth/token", data={"username": "alice", "password": "wrong1234"})
    assert response.status_code == 401


async def test_me_requires_token_and_updates_location(client):
    assert (await client.get("/users/me")).status_code == 401

    _, headers = await register_and_login(client, "alice", "client", name="Alice")
    me = (await client.get("/users/me", headers=headers)).json()
    assert me["name"] == "Alice"
    assert "password_hash" not in me

    response = await client.put("/users/me/location", headers=headers, json={
        "location": "Taipei", "latitude": 25.033, "longitude": 121.5654,
    })
    assert response.status_code == 200
    assert response.json()["latitude"] == 25.033

    response = await client.put("/users/me/location", headers=headers, json={
        "location": "Nowhere", "latitude": 120, "longitude": 0,
    })
    assert response.status_code == 422


async def test_search_design_by_price(client):
    await make_freelancer(client, "alice", "design", 80, name="A")
    await make_freelancer(client, "bob", "design", 50, name="B")
    await make_freelancer(client, "chris", "marketing", 40, name="C")

    response = await client.get("/freelancers", params={"category": "design", "sortBy": "price_asc"})
    assert response.status_code == 200
    assert [r["user"]["name"] for r in response.json()] == ["B", "A"]

    response = await client.get("/freelancers", params={"minPrice": 100})
    assert response.json() == []

    response = await client.get("/freelancers", params={"sortBy": "price_asc", "limit": 1, "offset": 1})
    assert [r["user"]["name"] for r in response.json()] == ["B"]


async def test_search_rejects_invalid_criteria(client):
    assert (await client.get("/freelancers", params={"rating": 7})).status_code == 422
    assert (await client.get("/freelancers", params={"sortBy": "popularity"})).status_code == 422


async def test_freelancer_detail_with_services_and_reviews(client):
    user, freelancer_headers, profile = await make_freelancer(client, "fiona", "design", 60)
    _, client_headers = await register_and_login(client, "carol", "client")

    response = await client.post("/services", headers=freelancer_headers, json={
        "title": "Logo", "description": "A logo", "price": 300,
    })
    assert response.status_code == 201

    response = await client.post("/reviews", headers=client_headers, json={
        "profile_id": profile["profile_id"], "rating": 4, "comment": "Nice",
    })
    assert response.status_code == 201

    detail = (await client.get(f"/freelancers/{user['user_id']}")).json()
    assert detail["avg_rating"] == 4
    assert detail["review_count"] == 1
    assert [s["title"] for s in detail["services"]] == ["Logo"]

    assert (await client.get("/freelancers/missing")).status_code == 404


async def test_job_and_proposal_flow(client):
    _, owner_headers = await register_and_login(client, "carl", "client")
    _, f1_headers, _ = await make_freelancer(client, "fre1", "development", 50)
    _, f2_headers, _ = await make_freelancer(client, "fre2", "development", 60)

    response = await client.post("/jobs", headers=owner_headers, json={
        "title": "API", "description": "Build an API", "category": "development",
        "budget": 2000, "location": "Remote",
    })
    assert response.status_code == 201
    job_id = response.json()["job_id"]

    body = {"price": 1500, "proposal": "Let me", "timeframe": "3 weeks"}
    p1 = (await client.post(f"/jobs/{job_id}/proposals", headers=f1_headers, json=body)).json()
    p2 = (await client.post(f"/jobs/{job_id}/proposals", headers=f2_headers, json=body)).json()
    duplicate = await client.post(f"/jobs/{job_id}/proposals", headers=f1_headers, json=body)
    assert duplicate.status_code == 400

    # 擁有者看到完整內容，其他人只看到精簡資訊
    full = (await client.get(f"/jobs/{job_id}/proposals", headers=owner_headers)).json()
    limited = (await client.get(f"/jobs/{job_id}/proposals", headers=f2_headers)).json()
    assert all("price" in p for p in full)
    assert all("price" not in p for p in limited)

    response = await client.patch(
        f"/proposals/{p1['proposal_id']}/status", headers=f2_headers, json={"status": "accepted"}
    )
    assert response.status_code == 403

    response = await client.patch(
        f"/proposals/{p1['proposal_id']}/status", headers=owner_headers, json={"status": "accepted"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    detail = (await client.get(f"/jobs/{job_id}")).json()
    assert detail["status"] == "in_progress"
    assert detail["proposal_count"] == 2

    [mine] = (await client.get("/proposals/my", headers=f2_headers)).json()
    assert mine["proposal_id"] == p2["proposal_id"]
    assert mine["status"] == "rejected"
    assert mine["job_title"] == "API"

    response = await client.patch(f"/jobs/{job_id}/status", headers=owner_headers, json={"status": "completed"})
    assert response.status_code == 200

    assert (await client.delete(f"/jobs/{job_id}", headers=f1_headers)).status_code == 403
    assert (await client.delete(f"/jobs/{job_id}", headers=owner_headers)).status_code == 204
    assert (await client.get(f"/jobs/{job_id}")).status_code == 404


async def test_booking_flow_and_available_slots(client):
    _, freelancer_headers, _ = await make_freelancer(client, "fiona", "photography", 80)
    _, client_headers = await register_and_login(client, "carol", "client")
    service = (await client.post("/services", headers=freelancer_headers, json={
        "title": "Portrait", "description": "1h shoot", "price": 100,
    })).json()

    response = await client.post("/appointments", headers=client_headers, json={
        "service_id": service["service_id"],
        "appointment_date": "2026-10-20T10:00:00",
        "end_time": "2026-10-20T11:00:00",
    })
    assert response.status_code == 201
    appointment = response.json()

    response = await client.post("/appointments", headers=client_headers, json={
        "service_id": service["service_id"],
        "appointment_date": "2026-10-20T11:00:00",
        "end_time": "2026-10-20T10:00:00",
    })
    assert response.status_code == 422

    slots = (await client.get(f"/available-slots/{service['service_id']}", params={"date": "2026-10-20"})).json()
    assert len(slots) == 9
    assert "2026-10-20T10:00:00" not in [s["start_time"] for s in slots]

    response = await client.put(
        f"/appointments/{appointment['appointment_id']}/status", headers=client_headers, json={"status": "confirmed"}
    )
    assert response.status_code == 403

    response = await client.put(
        f"/appointments/{appointment['appointment_id']}/status", headers=freelancer_headers, json={"status": "confirmed"}
    )
    assert response.json()["status"] == "confirmed"

    mine = (await client.get("/appointments", headers=freelancer_headers, params={"status": "confirmed"})).json()
    assert [a["appointment_id"] for a in mine] == [appointment["appointment_id"]]


async def test_messages_flow(client):
    alice, alice_headers = await register_and_login(client, "alice", "client", name="Alice")
    bob, bob_headers = await register_and_login(client, "bob", "freelancer", name="Bob")

    response = await client.post("/messages", headers=alice_headers, json={
        "receiver_id": bob["user_id"], "content": "Hello",
    })
    assert response.status_code == 201

    assert (await client.get("/messages/unread-count", headers=bob_headers)).json() == {"count": 1}

    [contact] = (await client.get("/messages/contacts", headers=bob_headers)).json()
    assert contact["user"]["user_id"] == alice["user_id"]
    assert contact["unread_count"] == 1

    conversation = (await client.get(f"/messages/{alice['user_id']}", headers=bob_headers)).json()
    assert [m["content"] for m in conversation] == ["Hello"]
    assert conversation[0]["is_read"] is True
    assert (await client.get("/messages/unread-count", headers=bob_headers)).json() == {"count": 0}
