"""Cart value and its JSON snapshot codec."""
import json
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from pydantic import ValidationError

from rocketcart.errors import ERROR_CORRUPT_SNAPSHOT, CartSnapshotError
from rocketcart.models import Product


@dataclass(frozen=True)
class Cart:
    """
    Ordered collection of cart entries, unique by product id.

    Never mutated in place: every change returns a new Cart, so a failed
    persist leaves the committed cart untouched.
    """
    items: Tuple[Product, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        seen = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"duplicate cart entry for product {item.id}")
            seen.add(item.id)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.items)

    def __contains__(self, product_id: object) -> bool:
        return any(item.id == product_id for item in self.items)

    def get(self, product_id: int) -> Optional[Product]:
        """Entry for a product, or None."""
        return next((item for item in self.items if item.id == product_id), None)

    def with_entry(self, product: Product) -> "Cart":
        """New cart with ``product`` appended."""
        return Cart(self.items + (product,))

    def with_amount(self, product_id: int, amount: int) -> "Cart":
        """New cart with the matching entry's amount replaced."""
        return Cart(tuple(
            item.with_amount(amount) if item.id == product_id else item
            for item in self.items
        ))

    def without(self, product_id: int) -> "Cart":
        """New cart with the matching entry dropped."""
        return Cart(tuple(item for item in self.items if item.id != product_id))

    def to_list(self) -> list:
        """Convert to a list of plain dicts (catalog fields included)."""
        return [item.model_dump(mode="json") for item in self.items]

    def to_json(self) -> str:
        """Serialize to the stored snapshot format."""
        return json.dumps(self.to_list(), ensure_ascii=False)

    @classmethod
    def from_json(cls, snapshot: str) -> "Cart":
        """
        Decode a stored snapshot.

        Raises:
            CartSnapshotError: Malformed JSON or an invalid cart
        """
        try:
            data = json.loads(snapshot)
        except (json.JSONDecodeError, TypeError) as e:
            raise CartSnapshotError(f"{ERROR_CORRUPT_SNAPSHOT}: {e}") from e

        if not isinstance(data, list):
            raise CartSnapshotError(f"{ERROR_CORRUPT_SNAPSHOT}: expected a list, got {type(data).__name__}")

        try:
            return cls(tuple(Product.model_validate(entry) for entry in data))
        except (ValidationError, ValueError) as e:
            raise CartSnapshotError(f"{ERROR_CORRUPT_SNAPSHOT}: {e}") from e
