"""
DigPaper - Project Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from digpaper.models import ProjectStatus


class ProjectCreate(BaseModel):
    name: str = Field(..., max_length=255)
    address: Optional[str] = None
    client_phone: Optional[str] = Field(None, max_length=50)


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus


class ProjectDetailsUpdate(BaseModel):
    address: Optional[str] = None
    client_phone: Optional[str] = Field(None, max_length=50)


class ProjectResponse(BaseModel):
    id: str
    name: str
    status: str
    address: Optional[str] = None
    client_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    document_count: int = 0

    class Config:
        from_attributes = True
