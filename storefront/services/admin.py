"""Admin login and token-based identity."""
import logging
from typing import Optional

from ..auth import verify_password, needs_rehash, hash_password, create_access_token, get_user_from_token
from ..config import SECRET_KEY
from ..database import transaction, store_errors
from ..errors import AuthError, ValidationError
from ..models import AdminUser

logger = logging.getLogger(__name__)


def login(db, username, password, secret_key: str = SECRET_KEY):
    """Check credentials and issue a signed access token.

    Returns (AdminUser, token). Unknown name and wrong password fail the same way.
    """
    if not username or not password:
        raise ValidationError('Username and password are required')
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError('Username and password must be text')

    with store_errors(db, 'logging in'):
        user = db.query(AdminUser).filter(AdminUser.name == username).first()

    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed admin login for '{username}'")
        raise AuthError('Invalid username or password')

    if needs_rehash(user.password_hash):
        with transaction(db, 'logging in'):
            user.password_hash = hash_password(password)

    token = create_access_token({'sub': str(user.id), 'username': user.name}, secret_key=secret_key)
    logger.info(f"Admin '{user.name}' logged in")
    return user, token


def current_admin(token: Optional[str], secret_key: str = SECRET_KEY) -> dict:
    """Identity behind a bearer token; AuthError when missing, expired or forged."""
    if not token:
        raise AuthError('Authentication required')
    identity = get_user_from_token(token, secret_key)
    if identity is None:
        raise AuthError('Invalid or expired token')
    return identity


def create_admin(db, name, password) -> AdminUser:
    """Create an admin account, or reset the password of an existing one."""
    if not name or not password:
        raise ValidationError('Username and password are required')
    with transaction(db, 'creating admin'):
        user = db.query(AdminUser).filter(AdminUser.name == name).first()
        if user is None:
            user = AdminUser(name=name, password_hash=hash_password(password))
            db.add(user)
        else:
            user.password_hash = hash_password(password)
    return user
