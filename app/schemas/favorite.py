from pydantic import BaseModel

from .post import PostOut


class FavoriteToggleOut(BaseModel):
    post_id: str
    favorited: bool
    count: int


class FavoriteCountOut(BaseModel):
    post_id: str
    count: int


class TrendingPostOut(BaseModel):
    post: PostOut
    score: int
