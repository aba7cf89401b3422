"""Sample catalogue inserted at startup when the sweets table is empty."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import DuplicateNameError
from app.models import Sweet
from app.services.sweets import SweetService

logger = logging.getLogger(__name__)

SAMPLE_SWEETS: tuple[dict[str, object], ...] = (
    {"name": "Chocolate Bar", "category": "Chocolate", "price": 2.50, "quantity": 50},
    {"name": "Gummy Bears", "category": "Candy", "price": 1.75, "quantity": 100},
    {"name": "Lollipop", "category": "Candy", "price": 1.00, "quantity": 75},
    {"name": "Toffee", "category": "Hard Candy", "price": 3.00, "quantity": 30},
    {"name": "Jelly Beans", "category": "Candy", "price": 2.25, "quantity": 80},
    {"name": "Marshmallows", "category": "Soft Candy", "price": 2.00, "quantity": 60},
    {"name": "Caramel Squares", "category": "Caramel", "price": 2.75, "quantity": 40},
    {"name": "Licorice", "category": "Candy", "price": 1.50, "quantity": 55},
)


def seed_sample_sweets(
    session_factory: sessionmaker[Session],
    sweets: SweetService,
) -> int:
    """
    Insert SAMPLE_SWEETS if no sweets exist yet. Returns the number inserted.

    Idempotent: a non-empty table is left alone, and names that already exist
    are skipped.
    """
    with session_factory() as db:
        count = db.query(func.count(Sweet.id)).scalar() or 0
    if count > 0:
        logger.info("Database already has %s sweets; skipping seed.", count)
        return 0

    seeded = 0
    for item in SAMPLE_SWEETS:
        try:
            sweets.create(**item)
        except DuplicateNameError:
            logger.info("Sweet %r already exists, skipping.", item["name"])
            continue
        seeded += 1
    logger.info("Seeded %s sample sweets.", seeded)
    return seeded
