"""
DigPaper - Forum Schemas
"""
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from .document import DocumentResponse


class ForumMessageCreate(BaseModel):
    """TEXT ou TASK_LIST (mensagens de voz usam multipart)"""
    message_type: str
    content: Optional[str] = None
    author_name: Optional[str] = None
    items: Optional[List[str]] = None


class ReplyCreate(BaseModel):
    content: str
    author_name: Optional[str] = None


class TaskItemToggle(BaseModel):
    completed_by: Optional[str] = None


class TaskItemResponse(BaseModel):
    id: str
    text: str
    completed: bool
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None


class ForumMessageResponse(BaseModel):
    id: str
    project_id: Optional[str] = None
    parent_id: Optional[str] = None
    message_type: str
    content: Optional[str] = None
    document_id: Optional[str] = None
    audio_path: Optional[str] = None
    audio_url: Optional[str] = None
    author_name: str
    created_at: Optional[datetime] = None
    reply_count: int = 0
    document: Optional[DocumentResponse] = None
    items: Optional[List[TaskItemResponse]] = None
