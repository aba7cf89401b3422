"""ORM model for sweets in the shop inventory."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String

from app.models.base import Base, UTCDateTime, utcnow

# Column ranges: Integer is 32-bit on PostgreSQL, price is NUMERIC(10, 2).
INTEGER_MAX = 2**31 - 1
PRICE_MAX = Decimal("99999999.99")


class Sweet(Base):
    """
    Inventory item. name is unique; price and quantity are never negative.

    The CHECK constraints back up the service-level checks so no write path
    can leave stock below zero.
    """

    __tablename__ = "sweets"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_sweets_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    category = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)
