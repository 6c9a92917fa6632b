import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("FIREBASE_PROJECT_ID", "test-project")
os.environ.setdefault("TWITCH_CLIENT_ID", "test-client")
os.environ.setdefault("TWITCH_CLIENT_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT_MAX_REQUESTS", "100000")

import pytest
import httpx
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from community_api import cache as cache_module
from community_api.app import app
from community_api.api.deps import get_db_session
from community_api.db.base import Base
from community_api.db import models  # noqa: F401
from community_api.db.dao import UserDAO
from community_api.services.auth_service import auth_service
from community_api.services.catalog_service import catalog_service
from community_api.utils.auth import create_access_token, build_token_claims
from community_api.utils.exceptions import AuthenticationError
from community_api.utils.firebase import FirebaseIdentity
from community_api.utils.ratelimit import rate_limiter


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis (only the calls the app makes)"""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        if ex:
            self.ttls[key] = ex

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if key in self.store:
                del self.store[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def incr(self, key):
        self.store[key] = int(self.store.get(key, 0)) + 1
        return self.store[key]

    async def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True

    async def ping(self):
        return True

    async def close(self):
        pass


class FakeIgdbClient:
    """Records catalog calls; every positive ID exists unless listed in missing"""

    def __init__(self):
        self.calls = []
        self.missing = set()
        self.failing = set()

    async def search_games(self, query, limit=10):
        self.calls.append(("search", query, limit))
        return [{"id": 1942, "name": f"{query} result"}][:limit]

    async def get_game_by_id(self, game_id):
        self.calls.append(("game", game_id))
        if game_id in self.failing:
            raise RuntimeError("catalog down")
        if game_id in self.missing:
            return None
        return {"id": game_id, "name": f"Game {game_id}"}

    async def get_games_by_category(self, category, limit=20, offset=0):
        self.calls.append(("category", category, limit, offset))
        return [{"id": 1, "name": f"{category} game"}]

    async def get_trending_games(self, limit=20):
        self.calls.append(("trending", limit))
        return [{"id": 2, "name": "Trending"}]

    async def get_popular_games(self, limit=20):
        self.calls.append(("popular", limit))
        return [{"id": 3, "name": "Popular"}]


class FakeVerifier:
    """Accepts tokens of the form "firebase:<uid>" """

    def __init__(self):
        self.emails = {}

    async def verify(self, token):
        if not token.startswith("firebase:"):
            raise AuthenticationError("Invalid Firebase token")
        uid = token.split(":", 1)[1]
        return FirebaseIdentity(
            uid=uid,
            email=self.emails.get(uid, f"{uid}@example.com"),
            name=f"Player {uid}",
            picture=None,
        )


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy drive BEGIN so that SAVEPOINTs nest inside the transaction
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis():
    redis = FakeRedis()
    cache_module.set_redis_client(redis)
    rate_limiter.reset()
    yield redis
    cache_module.set_redis_client(None)


@pytest.fixture
def fake_igdb(monkeypatch, fake_redis):
    client = FakeIgdbClient()
    monkeypatch.setattr(catalog_service, "client", client)
    return client


@pytest.fixture
def fake_verifier(monkeypatch):
    verifier = FakeVerifier()
    monkeypatch.setattr(auth_service, "verifier", verifier)
    return verifier


@pytest.fixture
async def make_user(session):
    async def _make_user(uid):
        user = await UserDAO.create(
            session,
            firebase_uid=uid,
            email=f"{uid}@example.com",
            display_name=f"Player {uid}",
        )
        await session.commit()
        return user

    return _make_user


@pytest.fixture
async def client(session_factory, fake_redis, fake_igdb, fake_verifier):
    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token(build_token_claims(user))
    return {"Authorization": f"Bearer {token}"}
