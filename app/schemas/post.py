from datetime import datetime

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    content: str | None = Field(default=None, min_length=1)


class PostOut(BaseModel):
    id: str
    author: str
    content: str
    original_artist: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostCreated(BaseModel):
    msg: str
    post: PostOut
