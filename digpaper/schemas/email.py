"""
DigPaper - Email Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from digpaper.models import FilterType


class EmailRuleCreate(BaseModel):
    sender_pattern: str = Field(..., max_length=255)
    project_id: Optional[str] = None
    description: Optional[str] = None


class EmailRuleResponse(BaseModel):
    id: str
    sender_pattern: str
    project_id: Optional[str] = None
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmailFilterCreate(BaseModel):
    pattern: str = Field(..., max_length=255)
    # Validado no serviço para devolver bad_request com mensagem própria
    filter_type: str


class EmailFilterResponse(BaseModel):
    id: str
    pattern: str
    filter_type: FilterType
    active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmailWebhookResponse(BaseModel):
    success: bool
    message: str
    documents_created: int
    documents_filtered: int
