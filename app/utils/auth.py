from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.core.config import Settings


def create_token(data: dict, secret: str, expires_delta: timedelta, algorithm: str = "HS256"):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def create_access_token(user_id: str, settings: Settings) -> str:
    return create_token(
        {"sub": user_id},
        settings.SECRET_KEY,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        algorithm=settings.ALGORITHM,
    )


def decode_subject(token: str, settings: Settings) -> str | None:
    """User id carried by a valid token, or ``None`` if the token does not verify."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")
