from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from sqlmodel import SQLModel

CONTENT_MAX_LENGTH = 280


class TweetCreate(BaseModel):
    content: str = Field(..., max_length=CONTENT_MAX_LENGTH)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Tweet content cannot be empty')
        return v.strip()


class TweetRead(SQLModel, table=False):
    id: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
