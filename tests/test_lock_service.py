"""
Tests for the Redis lock service. Redis itself is mocked.
"""
from unittest.mock import MagicMock, patch

import pytest
import redis

from restaurant.domain.errors import ConcurrencyConflictError
from restaurant.services.lock_service import (
    LockService,
    _RELEASE_LUA,
    held_locks,
    order_key,
    table_key,
)


@pytest.fixture
def fake_redis():
    client = MagicMock()
    with patch("restaurant.services.lock_service.redis.Redis.from_url", return_value=client) as from_url:
        yield client, from_url


def test_keys():
    assert order_key(7) == "order:7:lock"
    assert table_key("T1") == "table:T1:lock"


def test_uses_given_url(fake_redis):
    _, from_url = fake_redis

    LockService("redis://cache:6379/1")

    from_url.assert_called_once_with("redis://cache:6379/1", decode_responses=True)


def test_acquire_sets_key_only_if_absent(fake_redis):
    client, _ = fake_redis
    client.set.return_value = True

    assert LockService().acquire("order:1:lock", "tok", 30) is True
    client.set.assert_called_once_with(name="order:1:lock", value="tok", nx=True, ex=30)


def test_acquire_fails_when_held(fake_redis):
    client, _ = fake_redis
    client.set.return_value = None

    assert LockService().acquire("order:1:lock", "tok", 30) is False


def test_release_compares_token(fake_redis):
    client, _ = fake_redis
    client.eval.return_value = 1

    assert LockService().release("table:T1:lock", "tok") is True
    client.eval.assert_called_once_with(_RELEASE_LUA, 1, "table:T1:lock", "tok")


def test_release_of_foreign_lock_is_noop(fake_redis):
    client, _ = fake_redis
    client.eval.return_value = 0

    assert LockService().release("table:T1:lock", "not-mine") is False


def test_acquire_retries_on_connection_error(fake_redis):
    client, _ = fake_redis
    client.set.side_effect = [redis.ConnectionError("down"), True]

    assert LockService().acquire("order:1:lock", "tok", 30) is True
    assert client.set.call_count == 2


def test_acquire_gives_up_after_three_attempts(fake_redis):
    client, _ = fake_redis
    client.set.side_effect = redis.ConnectionError("down")

    with pytest.raises(redis.ConnectionError):
        LockService().acquire("order:1:lock", "tok", 30)

    assert client.set.call_count == 3


class TestHeldLocks:

    def test_locks_sorted_and_released_in_reverse(self, lock_service):
        with held_locks(lock_service, ["table:T2:lock", "order:3:lock", "table:T2:lock"]) as token:
            assert set(lock_service.held.values()) == {token}

        assert lock_service.acquired == ["order:3:lock", "table:T2:lock"]
        assert lock_service.released == ["table:T2:lock", "order:3:lock"]

    def test_conflict_releases_what_was_taken(self, lock_service):
        lock_service.held["table:T1:lock"] = "other"

        with pytest.raises(ConcurrencyConflictError) as exc:
            with held_locks(lock_service, ["order:1:lock", "table:T1:lock"]):
                pytest.fail("body must not run")

        assert exc.value.resource == "table:T1"
        assert lock_service.released == ["order:1:lock"]
        assert lock_service.held == {"table:T1:lock": "other"}

    def test_released_when_body_raises(self, lock_service):
        with pytest.raises(RuntimeError):
            with held_locks(lock_service, ["order:1:lock"]):
                raise RuntimeError("boom")

        assert lock_service.held == {}
