import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["DB_AUTO_CREATE"] = "1"

import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from main import app  # noqa: E402
from api.db.session import engine  # noqa: E402
from api.media.storage import MediaStorage, get_media_storage  # noqa: E402

PASSWORD = "Passw0rd1"


class FakeS3Client:
    """Records uploads the way boto3's ``upload_file`` would store them."""

    def __init__(self):
        self.objects = {}
        # Key prefixes (e.g. "image/") whose uploads fail like an unreachable bucket
        self.failing_prefixes = set()

    def upload_file(self, filename, bucket, key, ExtraArgs=None):
        if any(key.startswith(prefix) for prefix in self.failing_prefixes):
            raise ClientError(
                {"Error": {"Code": "ServiceUnavailable", "Message": "bucket unreachable"}},
                "PutObject",
            )
        with open(filename, "rb") as fh:
            self.objects[(bucket, key)] = {
                "body": fh.read(),
                "content_type": (ExtraArgs or {}).get("ContentType"),
            }

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def client(s3_client):
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    storage = MediaStorage(s3_client, "test-bucket", "https://media.test")
    app.dependency_overrides[get_media_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client: TestClient):
    """Sign a user up and return (auth headers, user id)."""

    def _make(username: str):
        r = client.post(
            "/api/auth/signup",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "full_name": username.title(),
                "password": PASSWORD,
            },
        )
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]["id"]

    return _make


@pytest.fixture
def make_video(client: TestClient):
    """Publish a video as the given user and return its payload."""

    def _make(headers: dict, title: str = "Video", description: str = "", duration: float = 12.5):
        r = client.post(
            "/api/videos/",
            headers=headers,
            data={"title": title, "description": description, "duration": str(duration)},
            files={
                "video_file": ("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4"),
                "thumbnail": ("thumb.png", b"\x89PNG\r\n\x1a\n", "image/png"),
            },
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make
