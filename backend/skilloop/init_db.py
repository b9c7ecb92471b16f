"""Create all tables for local development. Hosted databases own their schema."""

import logging

from . import models  # noqa: F401
from .database import Base, engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
