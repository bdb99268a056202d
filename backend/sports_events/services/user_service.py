"""
User service handling CRUD operations.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.exceptions import ConflictError, ErrorCode, NotFoundError
from sports_events.core.logging import get_logger
from sports_events.core.metrics import record_db_operation
from sports_events.db.base import utcnow
from sports_events.models.user import User
from sports_events.schemas.user import UserCreate, UserUpdate, UserStatsResponse
from sports_events.stores.base import PageRequest, PageResult
from sports_events.stores.user_store import UserStore

logger = get_logger(__name__)

# Columns that cannot be cleared by an update
_REQUIRED = ("first_name", "last_name", "email")


class UserService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.users = UserStore(db)

    async def get_user(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_by_email(self, email: str) -> User:
        user = await self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User", email)
        return user

    async def list_users(self, request: PageRequest) -> PageResult[User]:
        return await self.users.list_page(request)

    async def list_by_city(self, city: str) -> list[User]:
        return await self.users.list_by_city(city)

    async def list_with_upcoming_bookings(self) -> list[User]:
        return await self.users.list_with_upcoming_bookings(utcnow())

    async def stats(self) -> UserStatsResponse:
        return UserStatsResponse(total_users=await self.users.count())

    async def create_user(self, data: UserCreate) -> User:
        if await self.users.exists_by_email(data.email):
            raise ConflictError(f"Email {data.email} is already registered", ErrorCode.DUPLICATE_EMAIL)

        try:
            user = await self.users.add(User(**data.model_dump()))
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            await self.db.rollback()
            raise ConflictError(f"Email {data.email} is already registered", ErrorCode.DUPLICATE_EMAIL)
        record_db_operation("insert")
        logger.info("user_created", user_id=user.id)
        return user

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = await self.get_user(user_id)

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED
        }
        if "email" in changes and await self.users.exists_by_email(changes["email"], exclude_id=user_id):
            raise ConflictError(f"Email {changes['email']} is already registered", ErrorCode.DUPLICATE_EMAIL)

        for field, value in changes.items():
            setattr(user, field, value)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Email {changes.get('email')} is already registered", ErrorCode.DUPLICATE_EMAIL)
        record_db_operation("update")
        logger.info("user_updated", user_id=user_id, fields=sorted(changes))
        return user

    async def delete_user(self, user_id: int, cascade: bool = False) -> None:
        user = await self.get_user(user_id)

        bookings = await self.users.count_bookings(user_id)
        if bookings and not cascade:
            raise ConflictError(f"User {user_id} still has {bookings} booking(s)", ErrorCode.HAS_DEPENDENTS)

        await self.users.delete(user)
        await self.db.commit()
        record_db_operation("delete")
        logger.info("user_deleted", user_id=user_id, bookings_removed=bookings)
