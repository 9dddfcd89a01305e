from fastapi.testclient import TestClient


def test_toggle_subscription(client: TestClient, make_user):
    fan_headers, fan_id = make_user("subscriber")
    _, channel_id = make_user("channel")

    r = client.post(f"/api/subscriptions/c/{channel_id}", headers=fan_headers)
    assert r.status_code == 200
    assert r.json()["data"]["subscribed"] is True
    assert r.json()["message"] == "Subscribed to channel"

    r = client.get(f"/api/subscriptions/c/{channel_id}", headers=fan_headers)
    assert [u["id"] for u in r.json()["data"]] == [fan_id]

    r = client.get(f"/api/subscriptions/u/{fan_id}", headers=fan_headers)
    assert [u["username"] for u in r.json()["data"]] == ["channel"]

    r = client.post(f"/api/subscriptions/c/{channel_id}", headers=fan_headers)
    assert r.json()["data"]["subscribed"] is False
    r = client.get(f"/api/subscriptions/c/{channel_id}", headers=fan_headers)
    assert r.json()["data"] == []


def test_cannot_subscribe_to_self(client: TestClient, make_user):
    headers, user_id = make_user("narcissus")
    r = client.post(f"/api/subscriptions/c/{user_id}", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "You cannot subscribe to your own channel"


def test_subscribe_to_unknown_or_malformed_channel(client: TestClient, make_user):
    headers, _ = make_user("wanderer")
    r = client.post("/api/subscriptions/c/00000000-0000-4000-8000-000000000000", headers=headers)
    assert r.status_code == 404
    r = client.post("/api/subscriptions/c/12345", headers=headers)
    assert r.status_code == 400
