# backend/app/models/user.py

from typing import Optional
from pydantic import BaseModel, Field

# --- Model for the authenticated user ---
class UserRead(BaseModel):
    """
    Profile of the authenticated user, loaded from the `users` collection for the
    JWT 'sub' claim. Users are managed by a separate service; this API only reads them.
    """
    id: str = Field(..., description="User's unique identifier (JWT 'sub' claim).")
    fullName: Optional[str] = Field(None, description="User's display name, copied into reviews.")
    email: Optional[str] = None
    image: Optional[str] = Field(None, description="URL to the user's avatar, copied into reviews.")
    isAdmin: bool = Field(False, description="Grants access to catalog management endpoints.")

    class Config:
        from_attributes = True
