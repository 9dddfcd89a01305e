from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from sqlmodel import SQLModel

from api.videos.models import VideoRead


class PlaylistCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str = Field(default="", max_length=500)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError('Playlist name cannot be empty')
        return v.strip()

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return v.strip() if v else ""


class PlaylistUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Playlist name cannot be empty')
        return v.strip() if v is not None else None


class PlaylistRead(SQLModel, table=False):
    id: str
    name: str
    description: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    video_count: int = 0


class PlaylistDetail(PlaylistRead):
    videos: List[VideoRead] = []
