"""Schemas for task comments"""
from typing import Optional

from tasktracker.schemas.common import ApiModel, TrimmedStr, UtcDateTime
from tasktracker.schemas.user import UserSummary


class CommentCreate(ApiModel):
    # Blank text is rejected by the mutation engine with a specific message.
    text: TrimmedStr


class CommentResponse(ApiModel):
    id: int
    text: str
    author_id: int
    author: Optional[UserSummary] = None
    created_at: UtcDateTime
