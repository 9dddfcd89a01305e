from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from sqlmodel import SQLModel

from api.auth.models import UserPublic

CONTENT_MAX_LENGTH = 1000


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=CONTENT_MAX_LENGTH)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Comment content cannot be empty')
        return v.strip()


class CommentRead(SQLModel, table=False):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CommentWithOwner(CommentRead):
    owner: Optional[UserPublic] = None
