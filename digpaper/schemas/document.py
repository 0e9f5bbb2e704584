"""
DigPaper - Document Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from digpaper.models import DocumentStatus


class DocumentAssign(BaseModel):
    """project_id null devolve o documento à Inbox"""
    project_id: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)


class DocumentBatchAssign(BaseModel):
    document_ids: List[str]
    project_id: Optional[str] = None


class DocumentNotesUpdate(BaseModel):
    notes: Optional[str] = None


class DocumentStatusUpdate(BaseModel):
    status: DocumentStatus


class DocumentCategoryUpdate(BaseModel):
    category: Optional[str] = Field(None, max_length=100)


class DocumentResponse(BaseModel):
    id: str
    project_id: Optional[str] = None
    file_path: str
    file_type: str
    original_name: str
    uploaded_at: Optional[datetime] = None
    file_url: str
    notes: Optional[str] = None
    status: str
    category: Optional[str] = None
    audio_path: Optional[str] = None
    audio_url: Optional[str] = None

    class Config:
        from_attributes = True


class UploadResponse(BaseModel):
    id: str
    file_path: str
    file_type: str
    original_name: str
    file_url: str
    audio_url: Optional[str] = None
