"""Inventory service: sweet lifecycle with unique names and never-negative stock."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import (
    DuplicateNameError,
    InsufficientStockError,
    InternalFaultError,
    NotFoundError,
    ValidationError,
)
from app.models import Sweet
from app.models.base import utcnow
from app.models.sweet import INTEGER_MAX, PRICE_MAX

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "category", "price", "quantity")
CENT = Decimal("0.01")


def _to_decimal(value: float | Decimal) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_price(value: float | Decimal) -> Decimal:
    """Round to cents, as the NUMERIC(10, 2) column stores it."""
    price = _to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    if price < 0:
        raise ValidationError("Price must be a non-negative number")
    if price > PRICE_MAX:
        raise ValidationError(f"Price must not exceed {PRICE_MAX}")
    return price


def _check_quantity(value: int, *, positive: bool) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be an integer")
    if positive and value <= 0:
        raise ValidationError("Quantity must be a positive number")
    if value < 0:
        raise ValidationError("Quantity must be a non-negative integer")
    if value > INTEGER_MAX:
        raise ValidationError(f"Quantity must not exceed {INTEGER_MAX}")
    return value


def _check_text(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{label} cannot be empty")
    return value


def _newest_first(query):
    return query.order_by(Sweet.created_at.desc(), Sweet.id.desc())


class SweetService:
    """
    Create, query, update, delete, purchase and restock sweets.

    Every method runs in its own session and transaction. Stock changes are
    single conditional UPDATE statements, so concurrent purchases of the same
    sweet cannot oversell it.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create(
        self,
        name: str,
        category: str,
        price: float | Decimal,
        quantity: int | None = 0,
    ) -> Sweet:
        """Insert a sweet. Raises DuplicateNameError if the exact name exists."""
        name = _check_text(name, "Name")
        category = _check_text(category, "Category")
        sweet = Sweet(
            name=name,
            category=category,
            price=_to_price(price),
            quantity=_check_quantity(quantity or 0, positive=False),
        )
        with self._session_factory() as db:
            if self._name_taken(db, name):
                raise DuplicateNameError()
            db.add(sweet)
            self._commit(db, name)
            created = db.get(Sweet, sweet.id)
            if created is None:
                raise InternalFaultError("Failed to create sweet")
            logger.info(
                "Sweet created",
                extra={"sweet_id": created.id, "quantity": created.quantity},
            )
            return created

    def get_all(self) -> list[Sweet]:
        """All sweets, newest first."""
        with self._session_factory() as db:
            return _newest_first(db.query(Sweet)).all()

    def get_by_id(self, sweet_id: int) -> Sweet | None:
        with self._session_factory() as db:
            return db.get(Sweet, sweet_id)

    def search(
        self,
        name: str | None = None,
        category: str | None = None,
        min_price: float | Decimal | None = None,
        max_price: float | Decimal | None = None,
    ) -> list[Sweet]:
        """
        Sweets matching every given filter, newest first.

        name: substring match (LIKE wildcards in the input are literal).
        category: exact match. min_price / max_price: inclusive bounds.
        """
        with self._session_factory() as db:
            query = db.query(Sweet)
            if name:
                query = query.filter(Sweet.name.contains(name, autoescape=True))
            if category:
                query = query.filter(Sweet.category == category)
            if min_price is not None:
                query = query.filter(Sweet.price >= _to_decimal(min_price))
            if max_price is not None:
                query = query.filter(Sweet.price <= _to_decimal(max_price))
            return _newest_first(query).all()

    def update(self, sweet_id: int, **changes: Any) -> Sweet:
        """
        Apply a partial update; keys not given (or None) are left untouched.

        Raises NotFoundError or DuplicateNameError. When nothing would change
        the stored record is returned as-is and updated_at is not bumped.
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        values = {k: v for k, v in changes.items() if v is not None}
        if "name" in values:
            values["name"] = _check_text(values["name"], "Name")
        if "category" in values:
            values["category"] = _check_text(values["category"], "Category")
        if "price" in values:
            values["price"] = _to_price(values["price"])
        if "quantity" in values:
            values["quantity"] = _check_quantity(values["quantity"], positive=False)

        with self._session_factory() as db:
            sweet = db.get(Sweet, sweet_id)
            if sweet is None:
                raise NotFoundError("Sweet not found")

            values = {k: v for k, v in values.items() if getattr(sweet, k) != v}
            if not values:
                return sweet

            if "name" in values and self._name_taken(db, values["name"]):
                raise DuplicateNameError()

            for field, value in values.items():
                setattr(sweet, field, value)
            sweet.updated_at = utcnow()
            self._commit(db, values.get("name"))
            logger.info(
                "Sweet updated",
                extra={"sweet_id": sweet_id, "fields": sorted(values)},
            )
            return sweet

    def delete(self, sweet_id: int) -> None:
        """Remove a sweet permanently. Raises NotFoundError if absent."""
        with self._session_factory() as db:
            result = db.execute(delete(Sweet).where(Sweet.id == sweet_id))
            if result.rowcount == 0:
                db.rollback()
                raise NotFoundError("Sweet not found")
            db.commit()
        logger.info("Sweet deleted", extra={"sweet_id": sweet_id})

    def purchase(self, sweet_id: int, quantity: int) -> Sweet:
        """
        Decrement stock by quantity.

        Check and decrement happen in one statement guarded by
        quantity >= :requested; zero matched rows means the sweet is missing
        or stock is insufficient, and nothing was written.
        """
        quantity = _check_quantity(quantity, positive=True)
        with self._session_factory() as db:
            result = db.execute(
                update(Sweet)
                .where(Sweet.id == sweet_id, Sweet.quantity >= quantity)
                .values(quantity=Sweet.quantity - quantity, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                if db.get(Sweet, sweet_id) is None:
                    raise NotFoundError("Sweet not found")
                logger.info(
                    "Purchase rejected: insufficient stock",
                    extra={"sweet_id": sweet_id, "requested": quantity},
                )
                raise InsufficientStockError()
            db.commit()
            sweet = self._reload(db, sweet_id)
        logger.info(
            "Sweet purchased",
            extra={"sweet_id": sweet_id, "quantity": quantity, "remaining": sweet.quantity},
        )
        return sweet

    def restock(self, sweet_id: int, quantity: int) -> Sweet:
        """
        Increment stock by quantity. Raises NotFoundError if absent, and
        ValidationError if the total would overflow the quantity column.
        """
        quantity = _check_quantity(quantity, positive=True)
        with self._session_factory() as db:
            result = db.execute(
                update(Sweet)
                .where(Sweet.id == sweet_id, Sweet.quantity <= INTEGER_MAX - quantity)
                .values(quantity=Sweet.quantity + quantity, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                if db.get(Sweet, sweet_id) is None:
                    raise NotFoundError("Sweet not found")
                raise ValidationError(f"Stock cannot exceed {INTEGER_MAX} units")
            db.commit()
            sweet = self._reload(db, sweet_id)
        logger.info(
            "Sweet restocked",
            extra={"sweet_id": sweet_id, "quantity": quantity, "remaining": sweet.quantity},
        )
        return sweet

    @staticmethod
    def _reload(db: Session, sweet_id: int) -> Sweet:
        sweet = db.get(Sweet, sweet_id, populate_existing=True)
        if sweet is None:
            raise InternalFaultError("Failed to update sweet")
        return sweet

    @staticmethod
    def _name_taken(db: Session, name: str) -> bool:
        return db.query(Sweet.id).filter(Sweet.name == name).first() is not None

    def _commit(self, db: Session, name: str | None) -> None:
        """Commit; a unique-name violation from a concurrent writer becomes DuplicateNameError."""
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if name is not None and self._name_taken(db, name):
                raise DuplicateNameError() from e
            raise InternalFaultError("Failed to save sweet") from e
