"""Pydantic schemas for product requests and responses."""

from pydantic import BaseModel, Field


class ProductWrite(BaseModel):
    """Body of product create and update requests."""

    name: str = Field(..., min_length=1, max_length=100, description="Product name.")
    price: int | float = Field(..., description="Unit price; integers stay integers.")
    category: str = Field(..., min_length=1, max_length=100, description="Product category.")
    quantity: int = Field(..., description="Units in stock.")


class ProductRead(BaseModel):
    """Public representation of a stored product."""

    id: str
    name: str | None = None
    price: int | float | None = None
    category: str | None = None
    quantity: int | None = None


class ProductUpdated(BaseModel):
    id: str
    name: str


class ProductDeleted(BaseModel):
    id: str
