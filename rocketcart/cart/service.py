"""
Cart Store - the single owner of the current cart.

Every mutation is checked against the inventory's stock ceiling, persisted
to durable storage and only then committed in memory. Operations never
raise: failures become notices plus a CartResult describing them.

Usage:
    store = get_cart_store()
    result = await store.add_product(1)
    if not result.ok:
        print(result.failure)
"""
import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

from rocketcart.config import Settings, get_settings
from rocketcart.errors import ERROR_INVALID_INVENTORY_DATA, CartError, CartSnapshotError, InventoryTransportError
from rocketcart.i18n import detect_language
from rocketcart.inventory import InventoryClient
from rocketcart.logging import get_logger, log_id
from rocketcart.models import Product, Stock

from .models import Cart
from .notifications import LoggingNotifier, Notice, NoticeKind, NotificationSink
from .storage import PersistentStore, build_storage

logger = get_logger(__name__)

CartListener = Callable[[Cart], None]


def _ensure_same_product(product_id: int, *records) -> None:
    """Reject inventory records that describe a different product."""
    for record in records:
        if record.id != product_id:
            raise InventoryTransportError(ERROR_INVALID_INVENTORY_DATA, product_id)


class Inventory(Protocol):
    async def get_product(self, product_id: int) -> Product:
        ...

    async def get_stock(self, product_id: int) -> Stock:
        ...


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart operation."""
    ok: bool
    cart: Cart
    failure: Optional[NoticeKind] = None


class CartStore:
    """
    Owns the cart and exposes add/remove/update operations.

    Operations are serialized behind one lock covering the whole cart, so
    concurrent calls never race on a stale snapshot.
    """

    def __init__(
        self,
        inventory: Inventory,
        storage: PersistentStore,
        notifier: Optional[NotificationSink] = None,
        language: Optional[str] = None,
    ) -> None:
        self._inventory = inventory
        self._storage = storage
        self._notifier = notifier or LoggingNotifier()
        self.language = detect_language(language)
        self._lock = asyncio.Lock()
        self._listeners: List[CartListener] = []
        self._cart = self._load()

    def _load(self) -> Cart:
        """Initial cart from storage; anything unusable yields an empty cart."""
        try:
            snapshot = self._storage.load()
        except Exception as e:
            logger.warning(f"Cart storage unreadable, starting empty: {e}")
            return Cart()

        if not snapshot:
            return Cart()

        try:
            return Cart.from_json(snapshot)
        except CartSnapshotError as e:
            logger.warning(f"Ignoring stored cart: {e}")
            return Cart()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def cart(self) -> Cart:
        """Current committed cart."""
        return self._cart

    @property
    def items(self) -> Tuple[Product, ...]:
        return self._cart.items

    def get_entry(self, product_id: int) -> Optional[Product]:
        return self._cart.get(product_id)

    def __len__(self) -> int:
        return len(self._cart)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._cart

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """
        Call ``listener`` with the new cart after every commit.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def add_product(self, product_id: int) -> CartResult:
        """
        Add one unit of a product.

        A product already in the cart goes through the quantity update
        (amount + 1). A new product is added with amount 1 if it has stock.
        """
        async with self._lock:
            existing = self._cart.get(product_id)
            if existing is not None:
                return await self._update_amount(product_id, existing.amount + 1)

            try:
                product = await self._inventory.get_product(product_id)
                stock = await self._inventory.get_stock(product_id)
                _ensure_same_product(product_id, product, stock)

                if stock.amount <= 0:
                    logger.info(f"Product {log_id(product_id)} out of stock")
                    return self._fail(NoticeKind.OUT_OF_STOCK)

                self._persist_and_commit(self._cart.with_entry(product.with_amount(1)))
                return self._ok()
            except CartError as e:
                logger.warning(f"Failed to add product {log_id(product_id)}: {e}")
                return self._fail(NoticeKind.ADD_FAILED)
            except Exception:
                logger.exception(f"Unexpected error adding product {log_id(product_id)}")
                return self._fail(NoticeKind.ADD_FAILED)

    async def remove_product(self, product_id: int) -> CartResult:
        """Remove a product's entry; a product not in the cart is reported."""
        async with self._lock:
            if product_id not in self._cart:
                logger.info(f"Product {log_id(product_id)} not in cart")
                return self._fail(NoticeKind.REMOVE_FAILED)

            try:
                self._persist_and_commit(self._cart.without(product_id))
                return self._ok()
            except CartError as e:
                logger.warning(f"Failed to remove product {log_id(product_id)}: {e}")
                return self._fail(NoticeKind.REMOVE_FAILED)
            except Exception:
                logger.exception(f"Unexpected error removing product {log_id(product_id)}")
                return self._fail(NoticeKind.REMOVE_FAILED)

    async def update_product_amount(self, product_id: int, amount: int) -> CartResult:
        """
        Set a product's quantity.

        ``amount <= 0`` is ignored without a notice. Amounts above the current
        stock are rejected. An id that is not in the cart is skipped.
        """
        async with self._lock:
            return await self._update_amount(product_id, amount)

    async def _update_amount(self, product_id: int, amount: int) -> CartResult:
        # Caller holds the lock
        if amount <= 0:
            return self._ok()

        try:
            stock = await self._inventory.get_stock(product_id)
            _ensure_same_product(product_id, stock)

            if amount > stock.amount:
                logger.info(
                    f"Requested {amount} of product {log_id(product_id)}, "
                    f"only {stock.amount} in stock"
                )
                return self._fail(NoticeKind.INSUFFICIENT_STOCK)

            if product_id not in self._cart:
                logger.debug(f"Product {log_id(product_id)} not in cart, update skipped")
                return self._ok()

            self._persist_and_commit(self._cart.with_amount(product_id, amount))
            return self._ok()
        except CartError as e:
            logger.warning(f"Failed to update product {log_id(product_id)}: {e}")
            return self._fail(NoticeKind.UPDATE_FAILED)
        except Exception:
            logger.exception(f"Unexpected error updating product {log_id(product_id)}")
            return self._fail(NoticeKind.UPDATE_FAILED)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _persist_and_commit(self, new_cart: Cart) -> None:
        """Save first; the in-memory cart changes only if the save succeeded."""
        self._storage.save(new_cart.to_json())
        self._cart = new_cart

        for listener in list(self._listeners):
            try:
                listener(new_cart)
            except Exception:
                logger.exception("Cart listener failed")

    def _ok(self) -> CartResult:
        return CartResult(ok=True, cart=self._cart)

    def _fail(self, kind: NoticeKind) -> CartResult:
        notice = Notice.build(kind, self.language)
        try:
            self._notifier.notify(notice)
        except Exception:
            logger.exception(f"Notification sink failed for {kind.value}")
        return CartResult(ok=False, cart=self._cart, failure=kind)


# Singleton instance
_cart_store: Optional[CartStore] = None


def get_cart_store(settings: Optional[Settings] = None) -> CartStore:
    """Get CartStore singleton built from environment settings."""
    global _cart_store
    if _cart_store is None:
        settings = settings or get_settings()
        _cart_store = CartStore(
            inventory=InventoryClient(settings.inventory_api_url, timeout=settings.inventory_timeout),
            storage=build_storage(settings),
            language=settings.language,
        )
    return _cart_store


def reset_cart_store() -> None:
    """Drop the singleton so the next get_cart_store() reloads from storage."""
    global _cart_store
    _cart_store = None
