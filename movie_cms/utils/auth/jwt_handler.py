from jose import JWTError, ExpiredSignatureError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional

from movie_cms.utils.config import settings
from movie_cms.utils.exceptions import AuthError


def create_access_token(payload: dict, expires_minutes: Optional[int] = None) -> str:
    to_encode = payload.copy()
    now = datetime.now(timezone.utc)
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    expire = now + timedelta(minutes=minutes)
    to_encode.update({
        "exp": expire,
        "iat": now,
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Admin session expired, please login again")
    except JWTError:
        raise AuthError("Invalid or expired admin token")
