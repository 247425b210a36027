"""Shared helpers for the JSON blueprints."""
from functools import wraps

from flask import current_app, g, request

from ..services.admin import current_admin

SESSION_FACTORY_KEY = 'storefront.session_factory'


def get_session():
    """Request-scoped database session, closed on app context teardown."""
    if 'db' not in g:
        g.db = current_app.extensions[SESSION_FACTORY_KEY]()
    return g.db


def close_session(exc=None):
    db = g.pop('db', None)
    if db is not None:
        db.close()


def json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def bearer_token():
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def admin_required(view):
    """Reject the request with 401 unless it carries a valid admin token.

    Disabled when REQUIRE_ADMIN_TOKEN is off (local development only).
    """
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_app.config['REQUIRE_ADMIN_TOKEN']:
            g.admin = current_admin(bearer_token(), current_app.config['SECRET_KEY'])
        return view(*args, **kwargs)
    return wrapper
