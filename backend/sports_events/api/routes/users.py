"""
User endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from sports_events.api.dependencies import get_user_service, pagination
from sports_events.schemas.common import Page
from sports_events.schemas.user import UserCreate, UserUpdate, UserResponse, UserStatsResponse
from sports_events.services.user_service import UserService
from sports_events.stores.base import PageRequest

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=Page[UserResponse])
async def list_users(
    request: PageRequest = Depends(pagination()),
    service: UserService = Depends(get_user_service),
):
    return Page[UserResponse].of(await service.list_users(request), UserResponse.model_validate)


@router.get("/stats", response_model=UserStatsResponse)
async def user_stats(service: UserService = Depends(get_user_service)):
    return await service.stats()


@router.get("/with-upcoming-bookings", response_model=list[UserResponse])
async def list_users_with_upcoming_bookings(service: UserService = Depends(get_user_service)):
    return await service.list_with_upcoming_bookings()


@router.get("/email/{email}", response_model=UserResponse)
async def get_user_by_email(email: str, service: UserService = Depends(get_user_service)):
    return await service.get_by_email(email)


@router.get("/city/{city}", response_model=list[UserResponse])
async def list_users_by_city(city: str, service: UserService = Depends(get_user_service)):
    return await service.list_by_city(city)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return await service.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, service: UserService = Depends(get_user_service)):
    return await service.create_user(data)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, data: UserUpdate, service: UserService = Depends(get_user_service)):
    return await service.update_user(user_id, data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    cascade: bool = Query(False),
    service: UserService = Depends(get_user_service),
):
    """Delete a user. With cascade=true their bookings go too."""
    await service.delete_user(user_id, cascade)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
