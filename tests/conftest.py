# conftest.py - shared fixtures: a fresh in-memory app per test

from datetime import datetime

import pytest

import store
from app import create_app
from auth import register_user
from config import TestConfig
from models import db

PASSWORD = 'correct-horse'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    return register_user('Shop Owner', 'owner@example.com', PASSWORD)


@pytest.fixture
def auth_client(client, user):
    r = client.post('/signin', data={'email': user.email, 'password': PASSWORD})
    assert r.status_code == 302
    return client


@pytest.fixture
def product(app):
    return store.create_product({
        'name': 'Notebook', 'category': 'Stationery',
        'cost_price': 100.0, 'selling_price': 150.0, 'quantity': 20,
    })


@pytest.fixture
def noon():
    return datetime(2026, 3, 14, 12, 0)


@pytest.fixture
def password():
    return PASSWORD
