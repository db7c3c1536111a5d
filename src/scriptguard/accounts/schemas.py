"""Pydantic schemas for admin account endpoints."""

from pydantic import BaseModel, Field


class AdminCreate(BaseModel):
    admin_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)


class AdminSessionResponse(BaseModel):
    admin_id: str
    name: str
    email: str
    session_token: str


class AccountDeleteResponse(BaseModel):
    admin_id: str
    projects_deleted: int
