"""
DigPaper - Push Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional


class PushSubscribeRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)
    author_name: Optional[str] = None


class PushUnsubscribeRequest(BaseModel):
    endpoint: str


class VapidKeyResponse(BaseModel):
    publicKey: str
