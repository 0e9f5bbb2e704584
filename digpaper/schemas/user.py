"""
DigPaper - User Profile Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProfilePhotoUpdate(BaseModel):
    photo_url: str = Field(..., min_length=1)


class UserProfileResponse(BaseModel):
    name: str
    photo_url: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
