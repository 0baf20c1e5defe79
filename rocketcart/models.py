"""Inventory records - Pydantic models for products and stock."""
from pydantic import BaseModel, ConfigDict, field_validator


class Product(BaseModel):
    """Catalog product, annotated with the quantity held in the cart.

    Only ``id`` and ``amount`` are interpreted; every other catalog field
    (title, price, image, ...) is carried through untouched.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    amount: int = 1

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v: int) -> int:
        if v < 1:
            raise ValueError("cart amount must be at least 1")
        return v

    def with_amount(self, amount: int) -> "Product":
        """Copy of this entry with a different quantity."""
        return self.model_copy(update={"amount": amount})


class Stock(BaseModel):
    """Maximum purchasable quantity for a product."""
    model_config = ConfigDict(extra="ignore")

    id: int
    amount: int

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v: int) -> int:
        if v < 0:
            raise ValueError("stock amount must not be negative")
        return v
