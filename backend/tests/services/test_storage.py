"""Tests for LocalStorage — JSON values in Redis, fail-open on errors.

Run: pytest backend/tests/services/test_storage.py -v
"""

import json

from gridboard.core.storage import DASHBOARDS_KEY, HINTS_DISMISSED_KEY, LocalStorage


async def test_set_then_get_round_trips_under_prefixed_key(storage, redis):
    assert await storage.set_json(DASHBOARDS_KEY, [{"id": "a"}]) is True
    assert json.loads(redis.data["test:dashboards"]) == [{"id": "a"}]
    assert await storage.get_json(DASHBOARDS_KEY) == [{"id": "a"}]


async def test_missing_key_returns_none(storage):
    assert await storage.get_json("nothing-here") is None


async def test_undecodable_value_is_discarded(redis_factory):
    storage = LocalStorage(redis_factory({"test:dashboards": "{not json"}), key_prefix="test:")
    assert await storage.get_json(DASHBOARDS_KEY) is None


async def test_redis_failure_fails_open(redis_factory):
    """Reads return None and writes return False; nothing raises."""
    storage = LocalStorage(redis_factory(fail=True), key_prefix="test:")
    assert await storage.get_json(DASHBOARDS_KEY) is None
    assert await storage.set_json(DASHBOARDS_KEY, []) is False


async def test_unserialisable_value_is_not_written(storage, redis):
    assert await storage.set_json(DASHBOARDS_KEY, {"bad": object()}) is False
    assert "test:dashboards" not in redis.data


async def test_flag_defaults_to_false_and_persists(storage):
    assert await storage.get_flag(HINTS_DISMISSED_KEY) is False
    await storage.set_flag(HINTS_DISMISSED_KEY, True)
    assert await storage.get_flag(HINTS_DISMISSED_KEY) is True


async def test_default_prefix_comes_from_settings(redis_factory):
    redis = redis_factory()
    storage = LocalStorage(redis)
    await storage.set_json("data_sources", [])
    assert "gridboard:data_sources" in redis.data
