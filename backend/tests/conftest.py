"""Shared fixtures: an app bound to a throwaway SQLite file, a client and accounts.

A file (not :memory:) is used so the dashboard worker threads, which each
open their own session, see the same database as the request thread.
"""

from collections import namedtuple

import pytest

from app import create_app
from config import TestConfig
from database.db import db

Account = namedtuple('Account', ['id', 'email', 'headers'])

PASSWORD = 'secret123'


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig, SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'kube-test.db'}")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email, role='FARMER', **extra):
    payload = {
        'email': email,
        'password': PASSWORD,
        'firstName': email.split('@')[0].title(),
        'lastName': 'Tester',
        'role': role,
    }
    payload.update(extra)
    resp = client.post('/api/auth/register', json=payload)
    assert resp.status_code == 201, resp.get_json()
    data = resp.get_json()['data']
    return Account(
        id=data['user']['id'],
        email=email,
        headers={'Authorization': f"Bearer {data['token']}"},
    )


@pytest.fixture
def farmer_a(client):
    return register(client, 'alice@kube.test')


@pytest.fixture
def farmer_b(client):
    return register(client, 'bob@kube.test')


@pytest.fixture
def admin(client):
    return register(client, 'root@kube.test', role='ADMIN')


@pytest.fixture
def seed(app):
    """Persist model instances and return their ids, in order."""
    def _seed(*objects):
        with app.app_context():
            db.session.add_all(objects)
            db.session.commit()
            return [obj.id for obj in objects]
    return _seed


def farm_payload(**overrides):
    payload = {
        'name': 'Green Acres',
        'location': 'Nakuru',
        'latitude': -0.3031,
        'longitude': 36.08,
        'area': 120,
    }
    payload.update(overrides)
    return payload


def create_farm(client, account, **overrides):
    resp = client.post('/api/farms', json=farm_payload(**overrides), headers=account.headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['data']['farm']
