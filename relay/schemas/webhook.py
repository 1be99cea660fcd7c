from typing import Optional

from pydantic import BaseModel, Field


class EventOutcomeSchema(BaseModel):
    event_type: str
    state: str
    source: Optional[str] = None
    reply_text: Optional[str] = None
    error: Optional[str] = None


class WebhookSummary(BaseModel):
    success: bool
    processed: int = 0
    replied: int = 0
    skipped: int = 0
    failed: int = 0
    results: list[EventOutcomeSchema] = Field(default_factory=list)
