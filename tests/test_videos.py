from fastapi.testclient import TestClient
from sqlmodel import Session, select

from api.db.models import Comment, Like, PlaylistItem, Video
from api.db.session import engine


def test_publish_uploads_media_and_stores_urls(client: TestClient, make_user, make_video, s3_client):
    headers, user_id = make_user("uploader")
    video = make_video(headers, title="  My first video ", description="hello", duration=42)

    assert video["title"] == "My first video"
    assert video["owner_id"] == user_id
    assert video["duration"] == 42
    assert video["views"] == 0
    assert video["is_published"] is True
    assert video["video_file"].startswith("https://media.test/video/")
    assert video["video_file"].endswith(".mp4")
    assert video["thumbnail"].startswith("https://media.test/image/")

    stored = {key: obj for (_, key), obj in s3_client.objects.items()}
    assert len(stored) == 2
    assert {obj["content_type"] for obj in stored.values()} == {"video/mp4", "image/png"}


def test_publish_requires_both_files(client: TestClient, make_user, s3_client):
    headers, _ = make_user("halfway")
    r = client.post(
        "/api/videos/",
        headers=headers,
        data={"title": "No thumb"},
        files={"video_file": ("clip.mp4", b"data", "video/mp4")},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Video file and thumbnail are required"
    assert s3_client.objects == {}


def test_publish_rejects_wrong_media_type(client: TestClient, make_user):
    headers, _ = make_user("mixup")
    r = client.post(
        "/api/videos/",
        headers=headers,
        data={"title": "Swapped"},
        files={
            "video_file": ("thumb.png", b"png", "image/png"),
            "thumbnail": ("thumb.png", b"png", "image/png"),
        },
    )
    assert r.status_code == 400


def test_get_video_counts_views_and_embeds_owner(client: TestClient, make_user, make_video):
    owner_headers, owner_id = make_user("star")
    viewer_headers, _ = make_user("audience")
    video = make_video(owner_headers)

    client.get(f"/api/videos/{video['id']}", headers=viewer_headers)
    r = client.get(f"/api/videos/{video['id']}", headers=viewer_headers)
    data = r.json()["data"]
    assert data["views"] == 2
    assert data["owner"] == {"id": owner_id, "username": "star", "full_name": "Star"}


def test_update_keeps_blank_fields_and_replaces_thumbnail(client: TestClient, make_user, make_video):
    headers, _ = make_user("editor")
    video = make_video(headers, title="Title", description="Desc")

    r = client.patch(
        f"/api/videos/{video['id']}",
        headers=headers,
        data={"title": "", "description": "New desc"},
        files={"thumbnail": ("new.jpg", b"jpeg", "image/jpeg")},
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["title"] == "Title"
    assert data["description"] == "New desc"
    assert data["thumbnail"] != video["thumbnail"]
    assert data["thumbnail"].endswith(".jpg")


def test_toggle_publish_flips_state(client: TestClient, make_user, make_video):
    headers, _ = make_user("flipper")
    video = make_video(headers)

    r = client.patch(f"/api/videos/toggle/publish/{video['id']}", headers=headers)
    assert r.json()["data"]["is_published"] is False
    assert r.json()["message"] == "Video publish status toggled to unpublished"
    r = client.patch(f"/api/videos/toggle/publish/{video['id']}", headers=headers)
    assert r.json()["data"]["is_published"] is True


def test_delete_video_cascades(client: TestClient, make_user, make_video):
    owner_headers, _ = make_user("deleter")
    fan_headers, _ = make_user("mourner")
    video = make_video(owner_headers)
    comment = client.post(
        f"/api/comments/{video['id']}", headers=fan_headers, json={"content": "rip"}
    ).json()["data"]
    client.post(f"/api/likes/toggle/v/{video['id']}", headers=fan_headers)
    client.post(f"/api/likes/toggle/c/{comment['id']}", headers=owner_headers)
    playlist = client.post("/api/playlists/", headers=fan_headers, json={"name": "Keep"}).json()["data"]
    client.patch(f"/api/playlists/add/{video['id']}/{playlist['id']}", headers=fan_headers)

    r = client.delete(f"/api/videos/{video['id']}", headers=owner_headers)
    assert r.status_code == 200
    assert r.json()["data"] == {"id": video["id"]}

    with Session(engine) as session:
        assert session.exec(select(Comment)).all() == []
        assert session.exec(select(Like)).all() == []
        assert session.exec(select(PlaylistItem)).all() == []

    assert client.get(f"/api/videos/{video['id']}", headers=owner_headers).status_code == 404
    r = client.get(f"/api/playlists/{playlist['id']}", headers=fan_headers)
    assert r.json()["data"]["videos"] == []


def test_failed_thumbnail_upload_leaves_no_video_or_orphan(client: TestClient, make_user, s3_client):
    headers, _ = make_user("unlucky")
    s3_client.failing_prefixes.add("image/")

    r = client.post(
        "/api/videos/",
        headers=headers,
        data={"title": "Lost"},
        files={
            "video_file": ("clip.mp4", b"data", "video/mp4"),
            "thumbnail": ("thumb.png", b"png", "image/png"),
        },
    )
    assert r.status_code == 502
    assert r.json() == {"status": "error", "message": "Failed to upload image", "data": None}
    assert s3_client.objects == {}
    with Session(engine) as session:
        assert session.exec(select(Video)).all() == []


def test_failed_thumbnail_replacement_keeps_old_thumbnail(client: TestClient, make_user, make_video, s3_client):
    headers, _ = make_user("keeper")
    video = make_video(headers)
    s3_client.failing_prefixes.add("image/")

    r = client.patch(
        f"/api/videos/{video['id']}",
        headers=headers,
        data={"title": "Changed"},
        files={"thumbnail": ("new.png", b"png", "image/png")},
    )
    assert r.status_code == 502
    r = client.get(f"/api/videos/{video['id']}", headers=headers)
    assert r.json()["data"]["thumbnail"] == video["thumbnail"]
    assert r.json()["data"]["title"] == video["title"]
