from fastapi.testclient import TestClient


def test_channel_stats(client: TestClient, make_user, make_video):
    channel_headers, channel_id = make_user("streamer")
    fan1_headers, _ = make_user("fanone")
    fan2_headers, _ = make_user("fantwo")

    r = client.get("/api/dashboard/stats", headers=channel_headers)
    assert r.json()["data"] == {
        "total_videos": 0,
        "total_views": 0,
        "total_subscribers": 0,
        "total_likes": 0,
    }

    first = make_video(channel_headers, title="One")
    second = make_video(channel_headers, title="Two")
    make_video(fan1_headers, title="Not mine")

    for headers in (fan1_headers, fan2_headers):
        client.get(f"/api/videos/{first['id']}", headers=headers)
        client.post(f"/api/likes/toggle/v/{first['id']}", headers=headers)
        client.post(f"/api/subscriptions/c/{channel_id}", headers=headers)
    client.get(f"/api/videos/{second['id']}", headers=fan1_headers)
    client.post(f"/api/likes/toggle/v/{second['id']}", headers=fan1_headers)

    r = client.get("/api/dashboard/stats", headers=channel_headers)
    assert r.status_code == 200
    assert r.json()["data"] == {
        "total_videos": 2,
        "total_views": 3,
        "total_subscribers": 2,
        "total_likes": 3,
    }


def test_channel_videos_include_unpublished(client: TestClient, make_user, make_video):
    headers, _ = make_user("studio")
    draft = make_video(headers, title="Draft")
    make_video(headers, title="Live")
    client.patch(f"/api/videos/toggle/publish/{draft['id']}", headers=headers)

    r = client.get("/api/dashboard/videos", headers=headers)
    assert sorted(v["title"] for v in r.json()["data"]) == ["Draft", "Live"]
