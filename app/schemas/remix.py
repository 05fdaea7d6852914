from pydantic import BaseModel, Field

from .post import PostOut


class RemixCreate(BaseModel):
    remix_id: str = Field(..., min_length=1)


class RemixOut(BaseModel):
    original_id: str
    remix_id: str
    original_artist: str | None = None


class OriginalOut(BaseModel):
    post_id: str
    original: PostOut | None = None
