"""
Pytest fixtures for stockroom backend tests.

Provides an in-memory database, the three standard identities (Founder and
two kitchens), a seeded catalog, and header helpers for the test client.
"""

import pytest

from stockroom import create_app
from stockroom.extensions import db
from stockroom.services.access_policy import CurrentUser, FOUNDER, HOME_CHEF
from stockroom.services.inventory_service import InventoryService


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Core DELETE statements skip the ORM immutability listeners
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        db.session.rollback()


@pytest.fixture(scope='function')
def service(db_session):
    """InventoryService bound to the test session."""
    return InventoryService(db_session)


@pytest.fixture
def founder():
    return CurrentUser(id="founder-1", role=FOUNDER)


@pytest.fixture
def chef_a():
    return CurrentUser(id="chef-user-a", role=HOME_CHEF, chef_id="chef_a")


@pytest.fixture
def chef_b():
    return CurrentUser(id="chef-user-b", role=HOME_CHEF, chef_id="chef_b")


@pytest.fixture(scope='function')
def catalog(service, founder):
    """
    Minimal catalog: two items, one vendor, two kitchens (chef_a, chef_b).
    Creating it writes five audit entries.
    """
    service.create_item(founder, {"id": "cnt_100ml", "name": "100 ml Container", "unit": "pcs", "min_stock": 50})
    service.create_item(founder, {"id": "cnt_200ml", "name": "200 ml Container", "unit": "pcs", "min_stock": 40})
    service.create_vendor(founder, {"id": "vendor_alpha", "name": "Alpha Packaging", "phone": "9876543210"})
    service.create_chef(founder, {"id": "chef_a", "name": "Chef A - South", "email": "a@example.com"})
    service.create_chef(founder, {"id": "chef_b", "name": "Chef B - North", "email": "b@example.com"})
    return service


def identity_headers(user: CurrentUser) -> dict:
    """Headers the upstream gateway would inject for this user."""
    headers = {
        'X-User-Id': user.id,
        'X-User-Role': user.role,
    }
    if user.chef_id:
        headers['X-Chef-Id'] = user.chef_id
    return headers
