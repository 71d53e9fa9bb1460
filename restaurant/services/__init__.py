"""
                        Services Module

Contains the services the request layer depends on.

Services:
    - storage: Durable order store (SQLAlchemy async)
"""

from restaurant.services.storage import BaseOrderStore, create_order_store

__all__ = ["BaseOrderStore", "create_order_store"]
