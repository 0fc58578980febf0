"""Authentication helpers and FastAPI security dependencies.

This module provides utilities to decode JWT tokens and the FastAPI
dependencies `get_current_user` and `get_current_student`, which validate
the bearer token and return the corresponding `User` model instance from
the database.

Tokens are issued by the surrounding platform; `create_access_token`
exists for scripts and tests. Token verification raises HTTPExceptions on
failure so it can be used directly inside route dependencies.
"""

from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlmodel import Session
from .config import settings
from .database import get_session
from . import models, repositories

bearer_scheme = HTTPBearer()


def create_access_token(user_id: int, expires_hours: int = None) -> str:
    """Return a signed token carrying `user_id`."""
    hours = settings.JWT_EXPIRE_HOURS if expires_hours is None else expires_hours
    expire = datetime.now(timezone.utc) + timedelta(hours=hours)
    payload = {"user_id": user_id, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str):
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail='token expired')
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail='invalid token')


def get_current_user(credentials: HTTPAuthorizationCredentials = Security(bearer_scheme),
                     db: Session = Depends(get_session)) -> models.User:
    """FastAPI dependency that returns the authenticated user.

    Raises HTTPException(401) for any authentication issue.
    """
    payload = decode_token(credentials.credentials)
    user_id = payload.get('user_id')
    if not user_id:
        raise HTTPException(status_code=401, detail='invalid token payload')
    user = repositories.UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(status_code=401, detail='user not found')
    return user


def get_current_student(user: models.User = Depends(get_current_user)) -> models.User:
    if user.role != 'student':
        raise HTTPException(status_code=403, detail='students only')
    return user
