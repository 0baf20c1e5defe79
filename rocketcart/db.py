"""
Redis Module - Upstash Redis client for cart snapshots.

Provides a singleton synchronous Upstash Redis client. Cart persistence is
synchronous with respect to the caller, so the async client is not used.
"""

from typing import Optional

from upstash_redis import Redis

from rocketcart.config import Settings, get_settings


_redis_client: Optional[Redis] = None


def get_redis_sync(settings: Optional[Settings] = None) -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = settings or get_settings()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


def reset_redis() -> None:
    """Drop the cached client (tests, credential rotation)."""
    global _redis_client
    _redis_client = None


class RedisKeys:
    """Redis key prefixes."""

    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"

