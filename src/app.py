"""Wiring of the layers. Transports (HTTP, CLI, ...) get their service from here."""

import logging

from sqlalchemy.orm import Session

from src.core.logging import setup_logging
from src.core.settings import BingoSettings, get_settings
from src.db.sql_repository import SQLGameRepository
from src.services.bingo_service import BingoService

logger = logging.getLogger(__name__)


def configure() -> BingoSettings:
    """Load settings and set up logging. Call once at startup."""
    settings = get_settings()
    log_file = setup_logging(settings.log_dir, settings.log_level)
    if log_file is not None:
        logger.info("Logging to %s", log_file)
    return settings


def get_service(db: Session) -> BingoService:
    settings = get_settings()
    return BingoService(
        SQLGameRepository(db), recent_songs_limit=settings.recent_songs_limit
    )
