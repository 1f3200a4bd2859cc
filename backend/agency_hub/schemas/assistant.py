"""
Pydantic v2 schemas for the AI assistant endpoints.

Replies are plain text: the model's Markdown, or a fixed message when
the assistant is unavailable.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, Field


class BriefingRequest(BaseModel):
    date: datetime.date | None = Field(
        default=None,
        description="Service day to brief on; defaults to today.",
    )


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, examples=["How many covers tonight?"])


class AssistantReply(BaseModel):
    text: str
