"""Pydantic v2 schemas for sign-in / session endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, examples=["admin@nexgen.com"])
    password: str = Field(..., min_length=1)


class SessionOut(BaseModel):
    """`access_token` is only filled in by sign-in; send it back as a Bearer token."""

    authenticated: bool
    user_id: str | None = None
    email: str | None = None
    role: str | None = None
    access_token: str | None = None
