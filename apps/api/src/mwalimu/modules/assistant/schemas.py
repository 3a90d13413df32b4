"""
Assistant Schemas

Pydantic models for assistant requests and responses.
"""

from typing import Literal

from pydantic import BaseModel, Field


class Message(BaseModel):
    """One turn of a chat conversation."""

    sender: Literal["user", "ai"]
    text: str


class ChatRequest(BaseModel):
    """
    A new chat message together with the conversation so far.

    The server keeps no chat state; the client replays the history each turn.
    """

    message: str = Field(..., min_length=1, max_length=4000)
    history: list[Message] = Field(default_factory=list, max_length=100)


class TutorChatRequest(ChatRequest):
    """Tutor chat message, optionally scoped to a learning resource."""

    resource_context: str = Field("", max_length=4000)


class ChatResponse(BaseModel):
    """The assistant's reply."""

    reply: Message


class ReportRequest(BaseModel):
    """A question about dashboard data."""

    query: str = Field(..., min_length=1, max_length=2000)
    context: str = Field("", max_length=20000, description="Dashboard data shown to the user")


class ReportResponse(BaseModel):
    """A generated report."""

    report: str


class EquityRequest(BaseModel):
    """County data to base an equity analysis on."""

    context: str = Field("", max_length=20000)


class WardEquity(BaseModel):
    """Resource availability and average score for one ward."""

    ward: str
    resource: int = Field(..., ge=0, le=100)
    score: int = Field(..., ge=0, le=100)


class EquityResponse(BaseModel):
    """Per-ward equity analysis."""

    wards: list[WardEquity]
