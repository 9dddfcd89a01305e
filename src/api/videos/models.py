from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel

from api.auth.models import UserPublic
from api.db.models import Video

# Public sort keys accepted by the listing endpoint.
SORT_FIELDS = {
    "created_at": Video.created_at,
    "updated_at": Video.updated_at,
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
}

SORT_TYPES = ("asc", "desc")


class VideoRead(SQLModel, table=False):
    id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    owner_id: str
    is_published: bool
    views: int
    created_at: datetime
    updated_at: datetime


class VideoDetail(VideoRead):
    """A single video with its owner's public profile and like summary."""
    owner: Optional[UserPublic] = None
    likes_count: int = 0
    is_liked: bool = False
