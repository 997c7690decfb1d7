"""Schemas for users and issued credentials"""
from pydantic import EmailStr, Field

from tasktracker.schemas.common import ApiModel, NonEmptyStr, UtcDateTime


class UserSummary(ApiModel):
    id: int
    username: str
    email: str


class UserResponse(UserSummary):
    created_at: UtcDateTime


class UserRegister(ApiModel):
    username: NonEmptyStr = Field(..., max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(ApiModel):
    email: EmailStr
    password: str


class AuthPayload(ApiModel):
    token: str
    user: UserResponse
