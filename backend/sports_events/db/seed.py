"""
Demo data for local development.

Each table is seeded only when it is empty, so running this against a
database that already has data is a no-op for that table.
"""

from datetime import timedelta
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.logging import get_logger
from sports_events.db.base import utcnow
from sports_events.models import (
    Booking, BookingStatus, Category, DifficultyLevel, Event, EventType, PaymentStatus, User, Venue,
)

logger = get_logger(__name__)

ICON_URL = "https://cdn-icons-png.flaticon.com/512/2936/2936886.png"

CATEGORIES = [
    ("Running", "Running and marathon events"),
    ("Cycling", "Cycling and bike events"),
    ("Swimming", "Swimming and water sports events"),
    ("Football", "Football and soccer events"),
    ("Basketball", "Basketball events"),
    ("Tennis", "Tennis events"),
]

VENUES = [
    dict(
        name="Kanteerava Stadium",
        address="Kanteerava Indoor Stadium, Bangalore",
        postal_code="560001",
        capacity=8000,
        image_url="https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?w=500",
        description="Modern indoor stadium with excellent facilities",
        amenities="Parking, Food Court, Medical Room, Changing Rooms",
    ),
    dict(
        name="Cubbon Park",
        address="Cubbon Park, Bangalore",
        postal_code="560001",
        capacity=2000,
        image_url="https://images.unsplash.com/photo-1441974231531-c6227db76b6e?w=500",
        description="Beautiful park setting for outdoor events",
        amenities="Parking, Restrooms, Food Stalls",
    ),
    dict(
        name="Lalbagh Botanical Garden",
        address="Lalbagh, Bangalore",
        postal_code="560004",
        capacity=1500,
        image_url="https://images.unsplash.com/photo-1416879595882-3373a0480b5b?w=500",
        description="Scenic botanical garden for nature events",
        amenities="Parking, Restrooms, Garden Cafe",
    ),
    dict(
        name="Eco Park",
        address="Eco Park, Bangalore",
        postal_code="560083",
        capacity=3000,
        image_url="https://images.unsplash.com/photo-1441974231531-c6227db76b6e?w=500",
        description="Eco-friendly venue with modern amenities",
        amenities="Parking, Food Court, Medical Room, Eco-Friendly",
    ),
]

USERS = [
    ("John", "Doe", "john.doe@example.com", "+91 9876543210"),
    ("Jane", "Smith", "jane.smith@example.com", "+91 9876543211"),
    ("Mike", "Johnson", "mike.johnson@example.com", "+91 9876543212"),
]


async def _is_empty(session: AsyncSession, model) -> bool:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one() == 0


async def _by(session: AsyncSession, column, value):
    return (await session.execute(select(column.class_).where(column == value).limit(1))).scalar_one_or_none()


def _event(title, description, days, category, venue, **fields) -> Event:
    """`days` = (event, registration start, registration end), relative to now."""
    now = utcnow()
    event_in, opens_in, closes_in = days
    return Event(
        title=title,
        description=description,
        event_date=now + timedelta(days=event_in),
        registration_start_date=now + timedelta(days=opens_in),
        registration_end_date=now + timedelta(days=closes_in),
        category_id=category.id,
        venue_id=venue.id,
        **fields,
    )


async def seed_demo_data(session: AsyncSession) -> None:
    if await _is_empty(session, Category):
        session.add_all(Category(name=n, description=d, icon_url=ICON_URL) for n, d in CATEGORIES)
        await session.flush()

    if await _is_empty(session, Venue):
        session.add_all(
            Venue(city="Bangalore", state="Karnataka", country="India", **fields) for fields in VENUES
        )
        await session.flush()

    if await _is_empty(session, User):
        session.add_all(
            User(first_name=f, last_name=l, email=e, phone_number=p, city="Bangalore", state="Karnataka")
            for f, l, e, p in USERS
        )
        await session.flush()

    if await _is_empty(session, Event):
        running = await _by(session, Category.name, "Running")
        cycling = await _by(session, Category.name, "Cycling")
        swimming = await _by(session, Category.name, "Swimming")
        stadium = await _by(session, Venue.name, "Kanteerava Stadium")
        park = await _by(session, Venue.name, "Cubbon Park")

        if running and stadium:
            session.add(_event(
                "Bangalore Marathon 2024",
                "Join us for the annual Bangalore Marathon featuring 5K, 10K, and 21K runs "
                "through the city's beautiful streets.",
                (30, -10, 25), running, stadium,
                event_type=EventType.MARATHON,
                difficulty_level=DifficultyLevel.INTERMEDIATE,
                max_participants=1000,
                price=Decimal("500.00"),
                image_url="https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?w=800",
                banner_url="https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?w=1200",
                rules="Participants must be 16+ years old. Medical certificate required.",
                prize_info="Winner: Rs. 50,000, Runner-up: Rs. 25,000, Third place: Rs. 10,000",
                contact_info="Email: marathon@bangalore.com, Phone: +91 9876543210",
            ))
        if cycling and park:
            session.add(_event(
                "City Cycling Challenge",
                "A fun cycling event through Bangalore's iconic locations. Perfect for all skill levels.",
                (45, -5, 40), cycling, park,
                event_type=EventType.CYCLING,
                difficulty_level=DifficultyLevel.BEGINNER,
                max_participants=500,
                price=Decimal("300.00"),
                image_url="https://images.unsplash.com/photo-1558618047-3c8c76ca7d13?w=800",
                banner_url="https://images.unsplash.com/photo-1558618047-3c8c76ca7d13?w=1200",
                rules="Helmet mandatory. Own bicycle required.",
                prize_info="Winner: Rs. 20,000, Runner-up: Rs. 10,000",
                contact_info="Email: cycling@bangalore.com, Phone: +91 9876543211",
            ))
        if swimming and stadium:
            session.add(_event(
                "Swimming Championship",
                "Competitive swimming event with multiple categories and age groups.",
                (60, -15, 55), swimming, stadium,
                event_type=EventType.SWIMMING,
                difficulty_level=DifficultyLevel.ADVANCED,
                max_participants=200,
                price=Decimal("400.00"),
                image_url="https://images.unsplash.com/photo-1530549387789-4c1017266635?w=800",
                banner_url="https://images.unsplash.com/photo-1530549387789-4c1017266635?w=1200",
                rules="Swimming certificate required. Age groups: 16-25, 26-40, 40+",
                prize_info="Winner: Rs. 30,000, Runner-up: Rs. 15,000, Third place: Rs. 5,000",
                contact_info="Email: swimming@bangalore.com, Phone: +91 9876543212",
            ))
        await session.flush()

    if await _is_empty(session, Booking):
        john = await _by(session, User.email, "john.doe@example.com")
        jane = await _by(session, User.email, "jane.smith@example.com")
        marathon = await _by(session, Event.title, "Bangalore Marathon 2024")
        cycling_event = await _by(session, Event.title, "City Cycling Challenge")

        if john and marathon:
            session.add(Booking(
                user_id=john.id,
                event_id=marathon.id,
                total_amount=marathon.price,
                payment_status=PaymentStatus.COMPLETED,
                booking_status=BookingStatus.CONFIRMED,
                payment_reference="PAY123456789",
                notes="First time participant",
                emergency_contact="+91 9876543210",
            ))
        if jane and cycling_event:
            session.add(Booking(
                user_id=jane.id,
                event_id=cycling_event.id,
                total_amount=cycling_event.price,
                payment_status=PaymentStatus.PENDING,
                booking_status=BookingStatus.CONFIRMED,
                notes="Bringing own bicycle",
                emergency_contact="+91 9876543211",
            ))

    await session.commit()
    logger.info("demo_data_seeded")
