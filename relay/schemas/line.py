from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LineSource(BaseModel):
    type: str = "user"  # user, group, room
    userId: Optional[str] = None
    groupId: Optional[str] = None
    roomId: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class LineMessage(BaseModel):
    id: Optional[str] = None
    type: str  # text, image, video, audio, file, location, sticker
    text: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class LineEvent(BaseModel):
    type: str  # message, follow, unfollow, join, leave, postback, ...
    replyToken: Optional[str] = None
    source: Optional[LineSource] = None
    message: Optional[LineMessage] = None
    timestamp: Optional[int] = None
    webhookEventId: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_text_message(self) -> bool:
        return self.type == "message" and self.message is not None and self.message.type == "text"

    @property
    def user_id(self) -> Optional[str]:
        return self.source.userId if self.source else None


class LineWebhookRequest(BaseModel):
    destination: Optional[str] = None
    events: list[LineEvent] = Field(default_factory=list)
