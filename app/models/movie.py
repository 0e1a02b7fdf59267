# backend/app/models/movie.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# --- Embedded documents ---
class CastMember(BaseModel):
    """A cast entry as stored on the movie document. Extra keys are kept as-is."""
    name: Optional[str] = None
    image: Optional[str] = None

    class Config:
        extra = "allow"


class Review(BaseModel):
    """
    A review embedded in a movie document.

    userName/userImage are a snapshot of the reviewer's profile taken when the
    review was submitted; later profile changes are not propagated.
    """
    userName: Optional[str] = None
    userId: str
    userImage: Optional[str] = None
    rating: float
    comment: str
    createdAt: Optional[datetime] = None


class ReviewCreate(BaseModel):
    """Request body for POST /api/movies/{id}/reviews."""
    rating: float = Field(..., allow_inf_nan=False, description="Numeric score given by the reviewer.")
    comment: str = Field(..., description="Free text review.")


# --- Base Model ---
class MovieBase(BaseModel):
    """Descriptive attributes shared by every movie representation."""
    name: str = Field(..., description="Movie title.")
    desc: str = Field(..., description="Synopsis.")
    image: str = Field(..., description="Poster image URL.")
    titleImage: str = Field(..., description="Title/banner image URL.")
    category: str = Field(..., description="Category title the movie belongs to.")
    language: str
    year: int = Field(..., description="Release year.")
    time: int = Field(..., description="Runtime in minutes.")
    video: Optional[str] = Field(None, description="Trailer/stream URL.")
    rate: float = Field(0, allow_inf_nan=False, description="Average rating, derived from reviews.")
    numberOfReviews: int = Field(0, description="Review count, derived from reviews.")
    casts: List[CastMember] = Field(default_factory=list)


# --- Models for API Requests ---
class MovieCreate(MovieBase):
    """Request body for POST /api/movies."""
    pass


class MovieUpdate(BaseModel):
    """
    Request body for PUT /api/movies/{id}.

    Every field is optional; only supplied, truthy values overwrite the stored
    ones, so zero and empty strings cannot be written through this model.
    """
    name: Optional[str] = None
    desc: Optional[str] = None
    image: Optional[str] = None
    titleImage: Optional[str] = None
    rate: Optional[float] = Field(None, allow_inf_nan=False)
    numberOfReviews: Optional[int] = None
    category: Optional[str] = None
    time: Optional[int] = None
    language: Optional[str] = None
    year: Optional[int] = None
    video: Optional[str] = None
    casts: Optional[List[CastMember]] = None


# --- Models for API Responses ---
class MovieRead(MovieBase):
    """Full movie document as returned by the API."""
    id: str = Field(..., description="Internal database ID (MongoDB ObjectId as string).")
    reviews: List[Review] = Field(default_factory=list)
    userId: Optional[str] = Field(None, description="ID of the admin that created the movie.")
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaginatedMovieResponse(BaseModel):
    """Response structure for GET /api/movies."""
    movies: List[MovieRead]
    page: int
    pages: int
    totalMovies: int


class MessageResponse(BaseModel):
    """Plain acknowledgment body."""
    message: str
