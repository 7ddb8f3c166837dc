from __future__ import annotations

import contextlib
import logging
from typing import Iterator

from dotenv import load_dotenv

from settings import Settings, get_settings
from tempstore import StoreRegistry

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(settings: Settings | None = None) -> StoreRegistry:
    if settings is None:
        load_dotenv("local.env")
        settings = get_settings()

    _configure_logging(settings.log_level)

    registry = StoreRegistry(
        default_name=settings.default_store_name,
        snapshot_dir=settings.snapshot_dir,
        copy_values=settings.copy_values,
    )
    logger.info(
        "APP START: default store=%s snapshot_dir=%s copy_values=%s",
        settings.default_store_name,
        settings.snapshot_dir,
        settings.copy_values,
    )
    return registry


@contextlib.contextmanager
def lifespan(settings: Settings | None = None) -> Iterator[StoreRegistry]:
    registry = create_app(settings)
    try:
        yield registry
    finally:
        registry.close()
        logger.info("APP STOP: all stores terminated")
