"""Authentication and MFA schemas."""
from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str
    full_name: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str | None = None
    is_active: bool


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    access_expires_at: dt.datetime
    aal: Literal["aal1", "aal2"]
    mfa_required: bool = False


class EnrollRequest(BaseModel):
    friendly_name: str | None = Field(None, max_length=100)


class FactorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    factor_type: str
    friendly_name: str | None = None
    status: str
    created_at: dt.datetime | None = None


class EnrollOut(BaseModel):
    factor_id: str
    secret: str
    uri: str


class ChallengeOut(BaseModel):
    challenge_id: str
    expires_at: dt.datetime


class ChallengeRequest(BaseModel):
    factor_id: str


class VerifyRequest(BaseModel):
    factor_id: str
    challenge_id: str
    code: str = Field(..., min_length=6, max_length=8)


class AssuranceOut(BaseModel):
    current_level: Literal["aal1", "aal2"]
    next_level: Literal["aal1", "aal2"]


class MessageOut(BaseModel):
    detail: str
