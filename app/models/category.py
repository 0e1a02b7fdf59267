# backend/app/models/category.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    """Common attributes for a category."""
    title: str = Field(..., description="Display title of the category (e.g. 'Action').")


class CategoryCreate(CategoryBase):
    """Request body for POST /api/categories."""
    pass


class CategoryUpdate(BaseModel):
    """Request body for PUT /api/categories/{id}. An empty title leaves the stored one unchanged."""
    title: Optional[str] = Field(None, description="New title for the category.")


class CategoryRead(CategoryBase):
    """Model for representing a category in API responses."""
    id: str = Field(..., description="Internal database ID (MongoDB ObjectId as string).")
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True
