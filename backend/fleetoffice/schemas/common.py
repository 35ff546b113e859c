"""Shared pydantic building blocks."""
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ORMModel(BaseModel):
    """Read model populated from ORM attributes."""

    model_config = {"from_attributes": True}


class AddressFields(BaseModel):
    """Postal address carried by employees, suppliers and projects."""

    street: str | None = Field(default=None, max_length=200)
    country_code: str | None = Field(default=None, max_length=2)
    country: str | None = None
    region: str | None = None
    province: str | None = None
    city: str | None = None
    locality: str | None = None
    postal_code: str | None = Field(default=None, max_length=10)


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing."""

    items: list[T]
    total: int
    page: int
    size: int


class NameCreate(BaseModel):
    """Payload for lookup rows identified by a unique name."""

    name: str = Field(min_length=1, max_length=100)


class NameRead(ORMModel):
    id: int
    name: str
