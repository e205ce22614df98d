import fnmatch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from coaching.database import get_db, make_engine
from coaching.main import app
from coaching.models import Base
from coaching.redis_client import get_redis


class MemoryRedis:
    """In-memory stand-in for the handful of Redis commands the app uses."""

    def __init__(self):
        self.zsets: dict[str, dict[str, float]] = {}
        self.lists: dict[str, list[str]] = {}
        self.expiry: dict[str, int] = {}

    # ── keys ──

    def exists(self, key):
        return int(key in self.zsets or key in self.lists)

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if self.zsets.pop(key, None) is not None or self.lists.pop(key, None) is not None:
                deleted += 1
            self.expiry.pop(key, None)
        return deleted

    def keys(self, pattern):
        names = list(self.zsets) + list(self.lists)
        return [name for name in names if fnmatch.fnmatchcase(name, pattern)]

    def expire(self, key, seconds):
        self.expiry[key] = seconds
        return True

    def expireat(self, key, when):
        self.expiry[key] = when
        return True

    def ping(self):
        return True

    # ── sorted sets ──

    def zadd(self, key, mapping):
        self.zsets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def _in_range(self, score, low, high):
        low = float("-inf") if low == "-inf" else float(low)
        high = float("inf") if high == "+inf" else float(high)
        return low <= score <= high

    def zcount(self, key, low, high):
        return sum(1 for s in self.zsets.get(key, {}).values() if self._in_range(s, low, high))

    def zrangebyscore(self, key, low, high, withscores=False):
        items = sorted(
            ((m, s) for m, s in self.zsets.get(key, {}).items() if self._in_range(s, low, high)),
            key=lambda item: (item[1], item[0]),
        )
        return items if withscores else [m for m, _ in items]

    # ── lists ──

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    def pipeline(self):
        return MemoryPipeline(self)


class MemoryPipeline:
    def __init__(self, redis: MemoryRedis):
        self.redis = redis
        self.calls = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return queue

    def execute(self):
        results = [getattr(self.redis, name)(*args, **kwargs) for name, args, kwargs in self.calls]
        self.calls = []
        return results


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'coaching.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def memory_redis():
    return MemoryRedis()


@pytest.fixture
def client(session_factory, memory_redis):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: memory_redis
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
