"""
Category endpoints. Reads are served through the read-through cache.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from sports_events.api.dependencies import get_category_service
from sports_events.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from sports_events.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(service: CategoryService = Depends(get_category_service)):
    return await service.list_categories()


@router.get("/with-events", response_model=list[CategoryResponse])
async def list_categories_with_events(service: CategoryService = Depends(get_category_service)):
    """Categories that have at least one ACTIVE event."""
    return await service.list_with_active_events()


@router.get("/name/{name}", response_model=CategoryResponse)
async def get_category_by_name(name: str, service: CategoryService = Depends(get_category_service)):
    return await service.get_by_name(name)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    return await service.get_category(category_id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    return await service.create_category(data)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    return await service.update_category(category_id, data)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    cascade: bool = Query(False),
    service: CategoryService = Depends(get_category_service),
):
    """Delete a category. With cascade=true its events and their bookings go too."""
    await service.delete_category(category_id, cascade)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
