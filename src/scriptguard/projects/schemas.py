"""Pydantic schemas for project endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

LicenseMode = Literal["paid", "free-paywall"]


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    license_mode: LicenseMode = "paid"
    github_owner: str = Field(..., min_length=1)
    github_repo: str = Field(..., min_length=1)
    github_path: str = Field(..., min_length=1)
    github_token: Optional[str] = None
    paywall_key_minutes: int = Field(default=1, ge=1)
    companion_link: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    license_mode: Optional[LicenseMode] = None
    github_owner: Optional[str] = None
    github_repo: Optional[str] = None
    github_path: Optional[str] = None
    github_token: Optional[str] = None
    paywall_key_minutes: Optional[int] = Field(default=None, ge=1)
    companion_link: Optional[str] = None


class ProjectResponse(BaseModel):
    project_id: str
    name: str
    description: str
    author_id: str
    license_mode: str
    github_owner: str
    github_repo: str
    github_path: str
    has_github_token: bool
    paywall_key_minutes: int
    companion_link: Optional[str] = None
    created_at: datetime


class ProjectAdminCreate(BaseModel):
    admin_id: str = Field(..., min_length=1)


class ProjectAdminResponse(BaseModel):
    project_id: str
    admin_id: str


class ApiKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class ApiKeyResponse(BaseModel):
    project_id: str
    api_key: str
    name: str
    creator_id: str
    created_at: datetime


class ApiKeyRef(BaseModel):
    project_id: str
    api_key: str


class ApiKeyDeleteRequest(BaseModel):
    keys: list[ApiKeyRef]


class ApiKeyDeleteResponse(BaseModel):
    deleted: int
