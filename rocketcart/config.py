"""
Configuration - environment-driven settings.

All values are read from environment variables when get_settings() is
called, so tests can patch os.environ and build fresh settings.
"""

import os
from dataclasses import dataclass

DEFAULT_INVENTORY_API_URL = "http://localhost:3333"
DEFAULT_STORAGE_KEY = "@RocketShoes:cart"

STORAGE_BACKENDS = ("memory", "file", "redis")


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the cart store and its collaborators."""
    inventory_api_url: str = DEFAULT_INVENTORY_API_URL
    inventory_timeout: float = 10.0
    storage_backend: str = "memory"
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_path: str = "cart.json"
    cart_ttl_seconds: int = 0
    redis_url: str = ""
    redis_token: str = ""
    language: str = "en"


def get_settings() -> Settings:
    """Build settings from the current environment."""
    backend = os.environ.get("CART_STORAGE_BACKEND", "memory").strip().lower() or "memory"
    if backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"CART_STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}"
        )

    return Settings(
        inventory_api_url=os.environ.get("INVENTORY_API_URL", DEFAULT_INVENTORY_API_URL).rstrip("/"),
        inventory_timeout=_float_env("INVENTORY_TIMEOUT", 10.0),
        storage_backend=backend,
        storage_key=os.environ.get("CART_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        storage_path=os.environ.get("CART_STORAGE_PATH", "cart.json"),
        cart_ttl_seconds=_int_env("CART_TTL_SECONDS", 0),
        redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
        redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        language=os.environ.get("CART_LANGUAGE", "en"),
    )
