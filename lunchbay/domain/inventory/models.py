from sqlalchemy import (
    Column, String, Integer, Date, DateTime, Text, Enum, ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from typing import Optional

from lunchbay.infrastructure.database import Base
from lunchbay.domain.inventory.entities import Category, Item, ItemCondition


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; they were written as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    items = relationship("InventoryItemModel", back_populates="category", passive_deletes=True)

    def to_entity(self) -> Category:
        return Category(
            id=self.id,
            name=self.name,
            description=self.description,
            created_at=as_utc(self.created_at),
        )

    def __repr__(self):
        return f"<Category(name='{self.name}')>"


class InventoryItemModel(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_items_quantity_non_negative"),
        Index("idx_inventory_items_expiration", "expiration_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    # Category removal is an explicit store operation, never a schema cascade
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    unit = Column(String(50), nullable=False)
    expiration_date = Column(Date, nullable=False)
    condition = Column(
        Enum(ItemCondition, name="item_condition", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    category = relationship("CategoryModel", back_populates="items", lazy="joined")

    def to_entity(self) -> Item:
        return Item(
            id=self.id,
            name=self.name,
            category_id=self.category_id,
            category_name=self.category.name,
            category_description=self.category.description,
            quantity=self.quantity,
            unit=self.unit,
            expiration_date=self.expiration_date,
            condition=ItemCondition(self.condition),
            notes=self.notes,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )

    def __repr__(self):
        return f"<InventoryItem(id={self.id}, name='{self.name}')>"
