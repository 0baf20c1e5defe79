"""Pytest configuration and fixtures"""
import asyncio
import os
import pytest
from typing import Dict, List, Tuple

from rocketcart.cart import Cart, CartStore, CollectingNotifier, MemoryCartStorage
from rocketcart.errors import CartStorageError, InventoryNotFoundError, InventoryTransportError
from rocketcart.models import Product, Stock

# Set test environment variables
os.environ.setdefault("LOG_LEVEL", "WARNING")


class FakeInventory:
    """In-memory inventory recording every lookup."""

    def __init__(self) -> None:
        self.products: Dict[int, dict] = {}
        self.stock: Dict[int, int] = {}
        self.calls: List[Tuple[str, int]] = []
        self.broken = False

    def add(self, product_id: int, stock: int, **fields) -> None:
        self.products[product_id] = {"id": product_id, **fields}
        self.stock[product_id] = stock

    async def get_product(self, product_id: int) -> Product:
        self.calls.append(("product", product_id))
        await asyncio.sleep(0)
        if self.broken:
            raise InventoryTransportError("connection refused", product_id)
        if product_id not in self.products:
            raise InventoryNotFoundError("Product not found", product_id)
        return Product.model_validate(self.products[product_id])

    async def get_stock(self, product_id: int) -> Stock:
        self.calls.append(("stock", product_id))
        await asyncio.sleep(0)
        if self.broken:
            raise InventoryTransportError("connection refused", product_id)
        if product_id not in self.stock:
            raise InventoryNotFoundError("Product not found", product_id)
        return Stock(id=product_id, amount=self.stock[product_id])


class FailingStorage(MemoryCartStorage):
    """Memory storage whose writes can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.writes = 0

    def save(self, snapshot: str) -> None:
        if self.fail_writes:
            raise CartStorageError("disk full")
        self.writes += 1
        super().save(snapshot)


@pytest.fixture
def inventory():
    """Inventory with a couple of products"""
    inv = FakeInventory()
    inv.add(1, stock=5, title="Tênis de Caminhada Leve Confortável", price=179.9, image="https://img/1.jpg")
    inv.add(2, stock=0, title="Tênis VR Caminhada Confortável", price=139.9, image="https://img/2.jpg")
    return inv


@pytest.fixture
def storage():
    return FailingStorage()


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def make_store(inventory, storage, notifier):
    """Factory building a CartStore, optionally seeded with entries"""
    def _make(*entries: dict, language: str = "en") -> CartStore:
        if entries:
            storage.save(Cart(tuple(Product.model_validate(e) for e in entries)).to_json())
            storage.writes = 0
        return CartStore(inventory, storage, notifier=notifier, language=language)
    return _make


@pytest.fixture
def read_back(storage):
    """Decode what the storage currently holds"""
    def _read() -> Cart:
        snapshot = storage.load()
        return Cart.from_json(snapshot) if snapshot else Cart()
    return _read
