"""
SQLAlchemy Database Models

One relation holds every order ever taken. Deleting an order only stamps
deleted_at; rows are never physically removed.
"""

from sqlalchemy import Column, DateTime, Index, Integer

from restaurant.database import Base


class OrderRecord(Base):
    """
    Orders table.

    Indexes cover the two read paths: lookup by id and lookup by table
    (optionally narrowed by meal), both restricted to live rows.
    """
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_id_deleted_at", "id", "deleted_at"),
        Index("ix_orders_table_meal_deleted_at", "table_id", "meal_id", "deleted_at"),
        # Never hand out an id twice, even after the highest row is gone
        {"sqlite_autoincrement": True},
    )

    # Primary Key
    id = Column(Integer, primary_key=True, autoincrement=True)

    table_id = Column(Integer, nullable=False)
    meal_id = Column(Integer, nullable=False)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    added_at = Column(DateTime(timezone=True), nullable=False)
    ready_at = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        state = "deleted" if self.deleted_at is not None else "live"
        return f"<OrderRecord #{self.id} - table {self.table_id} - meal {self.meal_id} - {state}>"
