from datetime import datetime

from pydantic import BaseModel, Field

class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class UsernameUpdate(BaseModel):
    username: str = Field(..., min_length=1)

class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=1)

class UserOut(BaseModel):
    id: str
    username: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
