from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from barakaflow.config import settings

BCRYPT_ROUNDS = 10


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or an over-long password
        return False


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "name": user.name})


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a token. Raises JWTError for anything unusable:
    bad signature, expiry and malformed input are not told apart.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


__all__ = [
    "JWTError",
    "create_access_token",
    "create_user_token",
    "decode_access_token",
    "get_password_hash",
    "verify_password",
]
