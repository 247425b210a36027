"""Authentication helpers: password hashing, JWT tokens, admin identity."""
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from .config import SECRET_KEY, JWT_ALGORITHM, JWT_ACCESS_TOKEN_EXPIRE_MINUTES

# Password hasher (using Argon2)
ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if not isinstance(password, (str, bytes)):
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the hash was made with outdated Argon2 parameters."""
    return ph.check_needs_rehash(password_hash)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None,
                        secret_key: str = SECRET_KEY) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, secret_key, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret_key: str = SECRET_KEY) -> Optional[dict]:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, secret_key, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None  # Token expired
    except jwt.InvalidTokenError:
        return None  # Invalid token


def get_user_from_token(token: str, secret_key: str = SECRET_KEY) -> Optional[dict]:
    """Extract admin info from a valid token."""
    payload = decode_access_token(token, secret_key)
    if payload is None:
        return None

    user_id = payload.get("sub")
    username = payload.get("username")
    if user_id is None:
        return None

    return {"user_id": int(user_id), "username": username}
