from pydantic import BaseModel


class FriendRequestOut(BaseModel):
    from_user: str
    to_user: str
    status: str


class FriendListOut(BaseModel):
    count: int
    friends: list[str]
