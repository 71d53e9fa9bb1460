"""
Order Store Factory

Provides a single entry point for building the order store from settings.
The store is created once at startup and passed to the request layer; the
rest of the application only sees the BaseOrderStore interface.

Usage:
    from restaurant.services.storage import create_order_store

    store = create_order_store(settings)
    await store.initialize()
    order = await store.add_order(new_order(table_id=1, meal=meal))
"""

import logging
from typing import Optional

from restaurant.core.config import Settings, get_settings
from restaurant.services.storage.base import BaseOrderStore
from restaurant.services.storage.sql import SqlOrderStore

logger = logging.getLogger(__name__)


def create_order_store(settings: Optional[Settings] = None) -> BaseOrderStore:
    """
    Build the configured order store.

    Args:
        settings: Application settings (defaults to get_settings())

    Returns:
        BaseOrderStore: Store bound to settings.database_url
    """
    settings = settings or get_settings()

    store = SqlOrderStore.from_url(
        settings.database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"Order Store: {store.provider_name}")
    return store


__all__ = [
    "create_order_store",
    "BaseOrderStore",
    "SqlOrderStore",
]
