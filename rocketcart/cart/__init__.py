"""Cart package: models, storage, notices and the cart store."""
from .models import Cart
from .notifications import CollectingNotifier, LoggingNotifier, Notice, NoticeKind, NotificationSink
from .service import CartResult, CartStore, get_cart_store, reset_cart_store
from .storage import FileCartStorage, MemoryCartStorage, PersistentStore, RedisCartStorage, build_storage

__all__ = [
    "Cart",
    "CartResult",
    "CartStore",
    "CollectingNotifier",
    "FileCartStorage",
    "LoggingNotifier",
    "MemoryCartStorage",
    "Notice",
    "NoticeKind",
    "NotificationSink",
    "PersistentStore",
    "RedisCartStorage",
    "build_storage",
    "get_cart_store",
    "reset_cart_store",
]
