"""Sweet inventory endpoints. Every route requires a valid token; delete and restock require admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_sweet_service, require_admin
from app.core.errors import NotFoundError, ValidationError
from app.models import Sweet
from app.models.sweet import INTEGER_MAX
from app.schemas.auth import CurrentUser
from app.schemas.sweets import (
    MessageResponse,
    StockChangeRequest,
    SweetCreate,
    SweetResponse,
    SweetUpdate,
)
from app.services.sweets import SweetService

router = APIRouter(dependencies=[Depends(get_current_user)])

Sweets = Annotated[SweetService, Depends(get_sweet_service)]


def _parse_id(raw: str) -> int:
    """
    Path ids arrive as text so a non-numeric id gets a single 400 error.
    Integers outside the id column range cannot match a row: 404.
    """
    try:
        sweet_id = int(raw)
    except ValueError:
        raise ValidationError("Invalid sweet ID") from None
    if abs(sweet_id) > INTEGER_MAX:
        raise NotFoundError("Sweet not found")
    return sweet_id


def _out(sweet: Sweet) -> SweetResponse:
    return SweetResponse.model_validate(sweet)


@router.post("", response_model=SweetResponse, status_code=status.HTTP_201_CREATED)
def create_sweet(body: SweetCreate, sweets: Sweets) -> SweetResponse:
    """Add a sweet. Names must be unique (exact match)."""
    sweet = sweets.create(body.name, body.category, body.price, body.quantity)
    return _out(sweet)


@router.get("", response_model=list[SweetResponse])
def list_sweets(sweets: Sweets) -> list[SweetResponse]:
    """All sweets, newest first."""
    return [_out(s) for s in sweets.get_all()]


@router.get("/search", response_model=list[SweetResponse])
def search_sweets(
    sweets: Sweets,
    name: Annotated[str | None, Query()] = None,
    category: Annotated[str | None, Query()] = None,
    min_price: Annotated[float | None, Query(alias="minPrice", ge=0)] = None,
    max_price: Annotated[float | None, Query(alias="maxPrice", ge=0)] = None,
) -> list[SweetResponse]:
    """
    Filter sweets. All parameters are optional and combined with AND:
    name is a substring match, category exact, minPrice/maxPrice inclusive.
    """
    found = sweets.search(
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price,
    )
    return [_out(s) for s in found]


@router.get("/{sweet_id}", response_model=SweetResponse)
def get_sweet(sweet_id: str, sweets: Sweets) -> SweetResponse:
    sweet = sweets.get_by_id(_parse_id(sweet_id))
    if sweet is None:
        raise NotFoundError("Sweet not found")
    return _out(sweet)


@router.put("/{sweet_id}", response_model=SweetResponse)
def update_sweet(sweet_id: str, body: SweetUpdate, sweets: Sweets) -> SweetResponse:
    """Partial update: only fields present in the body change."""
    sweet = sweets.update(_parse_id(sweet_id), **body.model_dump(exclude_unset=True))
    return _out(sweet)


@router.delete("/{sweet_id}", response_model=MessageResponse)
def delete_sweet(
    sweet_id: str,
    sweets: Sweets,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> MessageResponse:
    """Delete a sweet (admin only)."""
    sweets.delete(_parse_id(sweet_id))
    return MessageResponse(message="Sweet deleted successfully")


@router.post("/{sweet_id}/purchase", response_model=SweetResponse)
def purchase_sweet(sweet_id: str, body: StockChangeRequest, sweets: Sweets) -> SweetResponse:
    """Buy quantity units. Returns 400 when stock is insufficient; stock is then unchanged."""
    sweet = sweets.purchase(_parse_id(sweet_id), body.quantity)
    return _out(sweet)


@router.post("/{sweet_id}/restock", response_model=SweetResponse)
def restock_sweet(
    sweet_id: str,
    body: StockChangeRequest,
    sweets: Sweets,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> SweetResponse:
    """Add quantity units to stock (admin only)."""
    sweet = sweets.restock(_parse_id(sweet_id), body.quantity)
    return _out(sweet)
