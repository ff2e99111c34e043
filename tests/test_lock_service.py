"""
Tests for the Redis checkout lock (Redis client mocked).
"""
from unittest.mock import MagicMock

import pytest
from redis.exceptions import RedisError

from app.services.lock_service import LockService


@pytest.fixture
def lock():
    svc = LockService(url="redis://localhost:6379/0")
    svc.redis = MagicMock()
    return svc


class TestLockService:
    def test_acquire_uses_set_nx_with_expiry(self, lock):
        lock.redis.set.return_value = True

        assert lock.acquire_checkout_lock(1, "token-a", ttl=30) is True
        lock.redis.set.assert_called_once_with(
            name="checkout:user:1:lock", value="token-a", nx=True, ex=30
        )

    def test_acquire_when_held(self, lock):
        lock.redis.set.return_value = None

        assert lock.acquire_checkout_lock(1, "token-b", ttl=30) is False

    def test_release_is_compare_and_delete(self, lock):
        lock.redis.eval.return_value = 1

        assert lock.release_checkout_lock(1, "token-a") is True
        args = lock.redis.eval.call_args.args
        assert args[1:] == (1, "checkout:user:1:lock", "token-a")

    def test_release_of_foreign_lock(self, lock):
        lock.redis.eval.return_value = 0

        assert lock.release_checkout_lock(1, "stale") is False

    def test_transient_redis_errors_are_retried(self, lock):
        lock.redis.set.side_effect = [RedisError("timeout"), True]

        assert lock.acquire_checkout_lock(3, "token", ttl=30) is True
        assert lock.redis.set.call_count == 2

    def test_persistent_redis_errors_propagate(self, lock):
        lock.redis.set.side_effect = RedisError("down")

        with pytest.raises(RedisError):
            lock.acquire_checkout_lock(3, "token", ttl=30)
        assert lock.redis.set.call_count == 3
