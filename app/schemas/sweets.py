"""Request/response schemas for sweet inventory endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.sweet import INTEGER_MAX, PRICE_MAX

NAME_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 255


def _required_text(value: str, field: str) -> str:
    """Strip whitespace and reject empty strings."""
    value = value.strip()
    if not value:
        raise ValueError(f"{field} is required")
    return value


class SweetCreate(BaseModel):
    """Body for POST /sweets."""

    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    category: str = Field(..., max_length=CATEGORY_MAX_LENGTH)
    price: float = Field(
        ..., ge=0, le=float(PRICE_MAX), description="Unit price; must not be negative."
    )
    quantity: int | None = Field(
        default=None, ge=0, le=INTEGER_MAX, description="Initial stock; defaults to 0."
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, "Name")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _required_text(v, "Category")


class SweetUpdate(BaseModel):
    """Body for PUT /sweets/{id}. Only fields present in the body are changed."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    category: str | None = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    price: float | None = Field(default=None, ge=0, le=float(PRICE_MAX))
    quantity: int | None = Field(default=None, ge=0, le=INTEGER_MAX)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _required_text(v, "Name")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _required_text(v, "Category")


class StockChangeRequest(BaseModel):
    """Body for purchase and restock."""

    quantity: int = Field(
        ..., gt=0, le=INTEGER_MAX, description="Number of units; must be a positive integer."
    )


class SweetResponse(BaseModel):
    """Sweet as returned to clients."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    category: str
    price: float
    quantity: int
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
