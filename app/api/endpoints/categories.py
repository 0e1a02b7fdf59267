# backend/app/api/endpoints/categories.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.deps import get_db, get_cache, get_current_admin
from app.data_access.redis_client import CacheRepository
from app.models.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.models.movie import MessageResponse
from app.models.user import UserRead
from app.services.category_service import CategoryService, CategoryNotFoundError

logger = logging.getLogger(__name__)
router = APIRouter()

# --- Dependency to get the service ---
def get_category_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
    cache: Optional[CacheRepository] = Depends(get_cache),
) -> CategoryService:
    return CategoryService(db=db, cache=cache)
# --- ---

# ************ PUBLIC ENDPOINTS ************

@router.get(
    "", # GET /api/categories
    response_model=List[CategoryRead],
    summary="List Categories",
)
async def list_categories(
    category_service: CategoryService = Depends(get_category_service),
):
    try:
        return await category_service.get_categories()
    except Exception as e:
        logger.error(f"Error listing categories: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# ************ ADMIN ENDPOINTS ************

@router.post(
    "", # POST /api/categories
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
)
async def create_category(
    category_data: CategoryCreate,
    admin: UserRead = Depends(get_current_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    try:
        return await category_service.create_category(category_data.title)
    except Exception as e:
        logger.error(f"Error creating category: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put(
    "/{category_id}", # PUT /api/categories/{category_id}
    response_model=CategoryRead,
    summary="Update Category",
    responses={404: {"description": "Category not found"}},
)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    admin: UserRead = Depends(get_current_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    try:
        return await category_service.update_category(category_id, category_data.title)
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating category {category_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete(
    "/{category_id}", # DELETE /api/categories/{category_id}
    response_model=MessageResponse,
    summary="Delete Category",
    responses={404: {"description": "Category not found"}},
)
async def delete_category(
    category_id: str,
    admin: UserRead = Depends(get_current_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    try:
        await category_service.delete_category(category_id)
        return MessageResponse(message="Category removed")
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting category {category_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
