"""
Scholaro - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
from faker import Faker
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

# Set testing environment before the app reads its settings
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['REDIS_URL'] = ''
os.environ['ALLOW_SEED_DATA'] = 'false'

from scholaro.main import app
from scholaro.utils.database import USERS, ensure_indexes, get_database
from scholaro.utils.security import create_access_token, get_password_hash

fake = Faker()

API = '/api'
PASSWORD = 'correct-horse-42'


@pytest.fixture
async def db():
    """Fresh in-process document store for each test"""
    database = AsyncMongoMockClient(tz_aware=True)['scholaro_test']
    await ensure_indexes(database)
    return database


@pytest.fixture
async def cache():
    FastAPICache.init(InMemoryBackend(), prefix='test-cache', expire=60)
    await FastAPICache.clear()
    yield
    await FastAPICache.clear()


@pytest.fixture
async def client(db, cache) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the database dependency overridden"""
    app.dependency_overrides[get_database] = lambda: db

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def insert_user(db, role='user', email=None, password=PASSWORD) -> dict:
    user = {
        'name': fake.name(),
        'email': (email or fake.unique.email()).lower(),
        'password': get_password_hash(password),
        'role': role,
        'created_at': datetime.now(timezone.utc),
    }
    await db[USERS].insert_one(user)
    return user


def bearer(user: dict) -> dict:
    token = create_access_token(str(user['_id']), user['email'], user['role'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def test_user(db) -> dict:
    return await insert_user(db)


@pytest.fixture
async def other_user(db) -> dict:
    return await insert_user(db)


@pytest.fixture
async def admin_user(db) -> dict:
    return await insert_user(db, role='admin')


@pytest.fixture
def auth_headers(test_user) -> dict:
    return bearer(test_user)


@pytest.fixture
def admin_auth_headers(admin_user) -> dict:
    return bearer(admin_user)
