from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field
from barakaflow.schemas.task import CamelModel


class SuggestionsResponse(BaseModel):
    tips: list[str]
    suggestions: list[str]
    approach: str


class DayOptimizationBody(CamelModel):
    summary: str
    break_suggestions: list[str]
    energy_management: list[str]
    actionable_steps: list[str]


class DayOptimizationResponse(CamelModel):
    date: date
    task_ids: list[int] = Field(default_factory=list)
    optimization: DayOptimizationBody | None = None
    message: str | None = None


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime | None = None


class ChatReply(BaseModel):
    reply: str
    history: list[ChatMessage] = Field(default_factory=list)
