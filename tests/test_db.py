"""Tests for the Redis client singleton"""
import pytest
from unittest.mock import patch

from rocketcart.config import Settings
from rocketcart.db import RedisKeys, get_redis_sync, reset_redis


@pytest.fixture(autouse=True)
def _fresh_client():
    reset_redis()
    yield
    reset_redis()


def test_client_is_created_once():
    settings = Settings(redis_url="https://redis.test", redis_token="token")

    with patch("rocketcart.db.Redis") as redis_cls:
        first = get_redis_sync(settings)
        second = get_redis_sync()

    assert first is second
    redis_cls.assert_called_once_with(url="https://redis.test", token="token")


def test_reset_creates_new_client():
    settings = Settings(redis_url="https://redis.test", redis_token="token")

    with patch("rocketcart.db.Redis") as redis_cls:
        get_redis_sync(settings)
        reset_redis()
        get_redis_sync(settings)

    assert redis_cls.call_count == 2


def test_missing_credentials():
    with pytest.raises(ValueError):
        get_redis_sync(Settings())


def test_cart_key():
    assert RedisKeys.cart_key("@RocketShoes:cart") == "cart:@RocketShoes:cart"
