"""Pydantic request/response models for the Verification API."""

from datetime import datetime

from pydantic import BaseModel, Field


class IssueCodeRequest(BaseModel):
    identifier: str = Field(..., examples=["diner@example.com", "9876543210"])


class VerifyCodeRequest(BaseModel):
    identifier: str
    code: str = Field(..., min_length=1, max_length=10)


class IssueCodeResponse(BaseModel):
    identifier: str
    channel: str
    expires_at: datetime
    message: str = "Verification code sent"


class VerifyCodeResponse(BaseModel):
    identifier: str
    verified: bool = True
    verified_at: datetime
