"""
Pytest fixtures: an in-memory SQLite app with stages and an admin account seeded.
"""
import pytest

from storefront.app import create_app
from storefront.routes import SESSION_FACTORY_KEY
from storefront.scripts.seed import seed_stages, seed_admin

ADMIN_NAME = 'admin'
ADMIN_PASSWORD = 'correct horse battery staple'


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'DATABASE_URL': 'sqlite://',
        'SECRET_KEY': 'test-secret-key',
        'CREATE_TABLES': True,
        'REQUIRE_ADMIN_TOKEN': True,
    })
    db = app.extensions[SESSION_FACTORY_KEY]()
    try:
        seed_stages(db)
        seed_admin(db, ADMIN_NAME, ADMIN_PASSWORD)
    finally:
        db.close()
    yield app
    app.extensions['storefront.engine'].dispose()


@pytest.fixture
def db(app):
    session = app.extensions[SESSION_FACTORY_KEY]()
    yield session
    session.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    resp = client.post('/api/admin/login', json={'username': ADMIN_NAME, 'password': ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {'Authorization': f"Bearer {resp.get_json()['token']}"}
