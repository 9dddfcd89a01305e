from fastapi.testclient import TestClient


def test_only_owner_can_update_video(client: TestClient, make_user, make_video):
    owner_headers, _ = make_user("owner1")
    other_headers, _ = make_user("other1")
    video = make_video(owner_headers, title="Original")

    r = client.patch(f"/api/videos/{video['id']}", headers=other_headers, data={"title": "Hijacked"})
    assert r.status_code == 403
    assert r.json()["status"] == "error"

    r = client.patch(f"/api/videos/{video['id']}", headers=owner_headers, data={"title": "New"})
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "New"


def test_cannot_delete_or_unpublish_other_users_video(client: TestClient, make_user, make_video):
    owner_headers, _ = make_user("owner2")
    other_headers, _ = make_user("other2")
    video = make_video(owner_headers)

    assert client.delete(f"/api/videos/{video['id']}", headers=other_headers).status_code == 403
    r = client.patch(f"/api/videos/toggle/publish/{video['id']}", headers=other_headers)
    assert r.status_code == 403

    r = client.get(f"/api/videos/{video['id']}", headers=other_headers)
    assert r.status_code == 200
    assert r.json()["data"]["is_published"] is True


def test_cannot_modify_other_users_comment(client: TestClient, make_user, make_video):
    owner_headers, _ = make_user("author")
    other_headers, _ = make_user("intruder")
    video = make_video(owner_headers)
    r = client.post(f"/api/comments/{video['id']}", headers=owner_headers, json={"content": "mine"})
    comment_id = r.json()["data"]["id"]

    r = client.patch(f"/api/comments/c/{comment_id}", headers=other_headers, json={"content": "yours"})
    assert r.status_code == 403
    assert client.delete(f"/api/comments/c/{comment_id}", headers=other_headers).status_code == 403

    r = client.patch(f"/api/comments/c/{comment_id}", headers=owner_headers, json={"content": "edited"})
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "edited"


def test_cannot_modify_other_users_tweet(client: TestClient, make_user):
    owner_headers, _ = make_user("tweeter")
    other_headers, _ = make_user("lurker")
    r = client.post("/api/tweets/", headers=owner_headers, json={"content": "hello"})
    tweet_id = r.json()["data"]["id"]

    r = client.patch(f"/api/tweets/{tweet_id}", headers=other_headers, json={"content": "pwned"})
    assert r.status_code == 403
    assert client.delete(f"/api/tweets/{tweet_id}", headers=other_headers).status_code == 403


def test_cannot_modify_other_users_playlist(client: TestClient, make_user, make_video):
    owner_headers, _ = make_user("curator")
    other_headers, _ = make_user("vandal")
    video = make_video(other_headers)
    r = client.post("/api/playlists/", headers=owner_headers, json={"name": "Faves"})
    playlist_id = r.json()["data"]["id"]

    r = client.patch(f"/api/playlists/{playlist_id}", headers=other_headers, json={"name": "Mine now"})
    assert r.status_code == 403
    r = client.patch(f"/api/playlists/add/{video['id']}/{playlist_id}", headers=other_headers)
    assert r.status_code == 403
    assert client.delete(f"/api/playlists/{playlist_id}", headers=other_headers).status_code == 403


def test_missing_resources_return_not_found(client: TestClient, make_user):
    headers, _ = make_user("seeker")
    missing = "00000000-0000-4000-8000-000000000000"

    assert client.get(f"/api/videos/{missing}", headers=headers).status_code == 404
    assert client.patch(f"/api/videos/{missing}", headers=headers, data={"title": "x"}).status_code == 404
    assert client.delete(f"/api/comments/c/{missing}", headers=headers).status_code == 404
    assert client.patch(f"/api/tweets/{missing}", headers=headers, json={"content": "x"}).status_code == 404
    r = client.get(f"/api/playlists/{missing}", headers=headers)
    assert r.status_code == 404
    assert r.json() == {"status": "error", "message": "Playlist not found", "data": None}
