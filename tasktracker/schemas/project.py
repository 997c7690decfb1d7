"""Schemas for projects"""
from typing import Optional

from tasktracker.schemas.common import ApiModel, NameStr, TrimmedStr, UtcDateTime
from tasktracker.schemas.user import UserSummary


class ProjectCreate(ApiModel):
    name: NameStr
    description: TrimmedStr = ""


class ProjectUpdate(ApiModel):
    name: Optional[NameStr] = None
    description: Optional[TrimmedStr] = None


class ProjectResponse(ApiModel):
    id: int
    name: str
    description: str
    owner_id: int
    owner: Optional[UserSummary] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime
