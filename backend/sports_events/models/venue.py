"""
Venue model. Events reference venues by foreign key only; there is no ORM
relationship, so deleting a venue never silently takes its events along.
"""

from sqlalchemy import Column, Integer, String, Float, CheckConstraint, Index

from sports_events.db.base import Base, TimestampMixin


class Venue(Base, TimestampMixin):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    capacity = Column(Integer, nullable=True)
    image_url = Column(String(500), nullable=True)
    description = Column(String(1000), nullable=True)
    amenities = Column(String(1000), nullable=True)

    __table_args__ = (
        CheckConstraint("capacity IS NULL OR capacity >= 0", name="check_venue_capacity_non_negative"),
        Index("ix_venues_city", "city"),
    )

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name={self.name}, city={self.city})>"
