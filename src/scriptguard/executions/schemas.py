"""Pydantic schemas for execution analytics endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ExecutionResponse(BaseModel):
    id: str
    project_id: str
    owner_identity: Optional[str] = None
    execution_type: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ExecutionCount(BaseModel):
    project_id: str
    count: int
