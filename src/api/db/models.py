import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    username: str = Field(index=True, unique=True, max_length=50)
    email: str = Field(index=True, unique=True, max_length=255)
    full_name: str = Field(default="", max_length=100)
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_now)


class Video(SQLModel, table=True):
    """An uploaded video. Media files live in object storage; only URLs are kept here."""
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    title: str = Field(index=True, max_length=255)
    description: str = Field(default="", max_length=5000)
    video_file: str = Field(max_length=1024)
    thumbnail: str = Field(max_length=1024)
    duration: float = Field(default=0, ge=0)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    is_published: bool = Field(default=True)
    views: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Comment(SQLModel, table=True):
    """Stores comments on videos."""
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    content: str = Field(max_length=1000)
    video_id: str = Field(foreign_key="video.id", index=True, max_length=36)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Like(SQLModel, table=True):
    """A user's like on exactly one of a video, a comment or a tweet."""
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("video_id", "liked_by", name="uq_like_video_user"),
        UniqueConstraint("comment_id", "liked_by", name="uq_like_comment_user"),
        UniqueConstraint("tweet_id", "liked_by", name="uq_like_tweet_user"),
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_like_single_target",
        ),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    video_id: Optional[str] = Field(default=None, index=True, max_length=36)
    comment_id: Optional[str] = Field(default=None, index=True, max_length=36)
    tweet_id: Optional[str] = Field(default=None, index=True, max_length=36)
    liked_by: str = Field(foreign_key="user.id", index=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now)


class Tweet(SQLModel, table=True):
    """Short text post on a user's channel."""
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    content: str = Field(max_length=280)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Playlist(SQLModel, table=True):
    """User-created playlists for organizing videos."""
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class PlaylistItem(SQLModel, table=True):
    """Items in playlists."""
    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlistitem_video"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    playlist_id: str = Field(foreign_key="playlist.id", index=True, max_length=36)
    video_id: str = Field(foreign_key="video.id", index=True, max_length=36)
    added_at: datetime = Field(default_factory=utc_now)
    position: int = Field(default=0)  # For ordering items in playlist


class Subscription(SQLModel, table=True):
    """`subscriber_id` follows the channel owned by `channel_id`."""
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscription_not_self"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    subscriber_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    channel_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now)
