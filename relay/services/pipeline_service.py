import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from relay.config import Settings
from relay.logging_config import EventLoggerAdapter, get_logger
from relay.schemas.line import LineEvent
from relay.services.fallback_service import FallbackResponder
from relay.services.indicator_service import IndicatorPolicy
from relay.services.line_service import LineService
from relay.services.nlu import NLUError, NLUGateway, build_nlu_gateway, derive_session_key
from relay.services.state_machine import EventState, is_terminal, transition

logger = get_logger("pipeline")

APOLOGY_RESPONSE = "ขออภัยครับ เกิดข้อผิดพลาดในระบบ กรุณาลองใหม่อีกครั้ง 🙏"


class ReplySource(str, Enum):
    NLU = "nlu"
    FALLBACK = "fallback"
    APOLOGY = "apology"


@dataclass
class EventOutcome:
    event_type: str
    state: EventState
    source: Optional[ReplySource] = None
    reply_text: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        if not is_terminal(self.state):
            raise ValueError(f"Event outcome needs a terminal state, got {self.state.value}")

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "state": self.state.value,
            "source": self.source.value if self.source else None,
            "reply_text": self.reply_text,
            "error": self.error,
        }


class MessagePipeline:
    """Takes one inbound event from intake to exactly one reply."""

    def __init__(
        self,
        line: LineService,
        gateway: NLUGateway,
        indicator: IndicatorPolicy,
        fallback: Callable[[str], str] | None = None,
    ):
        self.line = line
        self.gateway = gateway
        self.indicator = indicator
        self.fallback = fallback or FallbackResponder()

    async def handle_delivery(self, events: list[LineEvent]) -> list[EventOutcome]:
        """Handle every event of one webhook delivery concurrently."""
        if not events:
            return []
        return list(await asyncio.gather(*(self.handle_event(event) for event in events)))

    async def handle_event(self, event: LineEvent) -> EventOutcome:
        state = EventState.RECEIVED
        event_log = EventLoggerAdapter(
            logger,
            {"event_type": event.type, "event_id": event.webhookEventId, "user_id": event.user_id},
        )

        if not event.is_text_message:
            event_log.info("Skipping non-text event")
            return EventOutcome(event_type=event.type, state=transition(state, EventState.SKIPPED))

        state = transition(state, EventState.FILTERED)
        text = event.message.text or ""
        event_log.info(f"User said: {text[:100]}")

        state = transition(state, EventState.INDICATING)
        await self.indicator.indicate(event.user_id, text)

        state = transition(state, EventState.RESOLVING)
        reply_text, source = await self.resolve(text, event.user_id, event_log)

        if not event.replyToken:
            event_log.error("Text message without reply token, cannot reply")
            return EventOutcome(
                event_type=event.type,
                state=transition(state, EventState.FAILED),
                source=source,
                reply_text=reply_text,
                error="missing_reply_token",
            )

        try:
            await self.line.reply_message(event.replyToken, reply_text)
        except Exception as e:
            event_log.error(f"Reply failed, sending apology: {e}")
        else:
            event_log.info("Reply sent", context={"source": source.value})
            return EventOutcome(
                event_type=event.type,
                state=transition(state, EventState.REPLIED),
                source=source,
                reply_text=reply_text,
            )

        try:
            await self.line.reply_message(event.replyToken, APOLOGY_RESPONSE)
        except Exception as e:
            event_log.error(f"Apology reply failed: {e}", exc_info=True)
            return EventOutcome(
                event_type=event.type,
                state=transition(state, EventState.FAILED),
                source=source,
                reply_text=reply_text,
                error=str(e),
            )

        return EventOutcome(
            event_type=event.type,
            state=transition(state, EventState.REPLIED),
            source=ReplySource.APOLOGY,
            reply_text=APOLOGY_RESPONSE,
        )

    async def resolve(
        self,
        text: str,
        user_id: Optional[str],
        event_log: Optional[logging.LoggerAdapter] = None,
    ) -> tuple[str, ReplySource]:
        """Resolved reply text and where it came from."""
        event_log = event_log or EventLoggerAdapter(logger, {"user_id": user_id})

        if not self.gateway.ready:
            event_log.info("NLU not ready, using fallback", context={"reason": self.gateway.reason})
            return self.fallback(text), ReplySource.FALLBACK

        session_key = derive_session_key(user_id)
        try:
            result = await self.gateway.query(text.strip(), session_key)
        except NLUError as e:
            event_log.warning(f"NLU failed, using fallback: {e}", context={"cause": e.code})
            return self.fallback(text), ReplySource.FALLBACK
        except Exception as e:
            event_log.error(f"Unexpected NLU error, using fallback: {e}", exc_info=True)
            return self.fallback(text), ReplySource.FALLBACK

        event_log.info(
            "NLU result",
            context={"intent": result.intent, "confidence": result.confidence},
        )
        fulfillment = (result.text or "").strip()
        if not fulfillment:
            event_log.info("NLU returned empty fulfillment, using fallback")
            return self.fallback(text), ReplySource.FALLBACK
        return fulfillment, ReplySource.NLU


def create_pipeline(settings: Settings) -> MessagePipeline:
    """Wire the pipeline and its collaborators from settings. Called once at startup."""
    line = LineService(
        settings.line_channel_access_token,
        base_url=settings.line_api_base_url,
        timeout=settings.line_timeout_seconds,
    )
    indicator = IndicatorPolicy(
        line,
        mode=settings.indicator_mode,
        time_unit_seconds=settings.indicator_time_unit_seconds,
    )
    return MessagePipeline(
        line=line,
        gateway=build_nlu_gateway(settings),
        indicator=indicator,
        fallback=FallbackResponder(),
    )
