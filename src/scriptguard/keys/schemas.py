"""Pydantic schemas for key endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

KeyType = Literal["temporary", "permanent", "checkpoint"]


class KeyCreate(BaseModel):
    key: Optional[str] = Field(default=None, min_length=1, max_length=128)
    key_type: KeyType = "permanent"
    expires_at: Optional[datetime] = None
    owner_identity: str = Field(..., min_length=1, max_length=64)
    display_name: str = Field(..., min_length=1, max_length=255)
    note: Optional[str] = None
    bound_fingerprint: Optional[str] = None
    executor: Optional[str] = None


class NoteUpdate(BaseModel):
    note: str = ""


class KeyResponse(BaseModel):
    project_id: str
    key: str
    key_type: str
    expires_at: Optional[datetime] = None
    bound_fingerprint: Optional[str] = None
    executor: Optional[str] = None
    owner_identity: str
    display_name: str
    note: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
