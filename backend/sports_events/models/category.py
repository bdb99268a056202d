"""
Category model. Rarely written, heavily read; fronted by the read-through cache.
"""

from sqlalchemy import Column, Integer, String

from sports_events.db.base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(String(500), nullable=True)
    icon_url = Column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
