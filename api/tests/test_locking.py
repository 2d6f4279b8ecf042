"""Tests for optional per-entity recompute locking."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockError

from civictrust.config import settings
from civictrust.services.errors import DataUnavailableError
from civictrust.services.locking import lock_key, recompute_guard
from civictrust.services.trust import compute_organization_trust_score


class FakeLock:
    def __init__(self, acquired=True, release_error=None, acquire_error=None):
        self.acquired = acquired
        self.release_error = release_error
        self.acquire_error = acquire_error
        self.held = False

    async def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.held = self.acquired
        return self.acquired

    async def release(self):
        self.held = False
        if self.release_error is not None:
            raise self.release_error


class FakeRedis:
    def __init__(self, lock):
        self._lock = lock
        self.requested = []

    def lock(self, name, timeout=None, blocking_timeout=None):
        self.requested.append((name, timeout, blocking_timeout))
        return self._lock


@pytest.fixture
def locking_enabled(monkeypatch):
    monkeypatch.setattr(settings, "recompute_lock_enabled", True)
    monkeypatch.setattr(settings, "recompute_lock_timeout_seconds", 3)


class TestRecomputeGuard:
    def test_lock_key(self):
        assert lock_key("organization", "abc") == "recompute:organization:abc"

    async def test_disabled_never_touches_redis(self, monkeypatch):
        monkeypatch.setattr(settings, "recompute_lock_enabled", False)
        fake = FakeRedis(FakeLock())
        async with recompute_guard(fake, "member", "m1"):
            pass
        assert fake.requested == []

    async def test_no_client_is_a_noop(self, locking_enabled):
        async with recompute_guard(None, "member", "m1"):
            pass

    async def test_lock_held_for_the_block(self, locking_enabled):
        lock = FakeLock()
        fake = FakeRedis(lock)
        async with recompute_guard(fake, "organization", "o1"):
            assert lock.held
        assert not lock.held
        assert fake.requested == [("recompute:organization:o1", 3, 3)]

    async def test_acquire_timeout_raises_data_unavailable(self, locking_enabled):
        fake = FakeRedis(FakeLock(acquired=False))
        with pytest.raises(DataUnavailableError):
            async with recompute_guard(fake, "organization", "o1"):
                pytest.fail("body must not run without the lock")

    async def test_unreachable_redis_raises_data_unavailable(self, locking_enabled):
        fake = FakeRedis(FakeLock(acquire_error=RedisConnectionError("Connection refused")))
        with pytest.raises(DataUnavailableError):
            async with recompute_guard(fake, "organization", "o1"):
                pytest.fail("body must not run without the lock")

    async def test_expired_lock_on_release_does_not_fail(self, locking_enabled):
        fake = FakeRedis(FakeLock(release_error=LockError("lock expired")))
        async with recompute_guard(fake, "member", "m1"):
            pass

    async def test_unreachable_redis_on_release_does_not_fail(self, locking_enabled):
        fake = FakeRedis(FakeLock(release_error=RedisConnectionError("Connection reset")))
        async with recompute_guard(fake, "member", "m1"):
            pass

    async def test_scorer_runs_under_lock(self, db, make, locking_enabled):
        org = await make.organization()
        fake = FakeRedis(FakeLock())

        await compute_organization_trust_score(db, org.id, redis_client=fake)

        assert fake.requested[0][0] == f"recompute:organization:{org.id}"

    async def test_contended_scorer_leaves_score_untouched(self, db, make, locking_enabled):
        org = await make.organization(trust_score=55.0)
        fake = FakeRedis(FakeLock(acquired=False))

        with pytest.raises(DataUnavailableError):
            await compute_organization_trust_score(db, org.id, redis_client=fake)
        await db.refresh(org)
        assert org.trust_score == 55.0
