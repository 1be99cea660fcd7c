import asyncio
import random
from enum import Enum
from typing import Awaitable, Callable, Optional

from relay.logging_config import get_logger
from relay.services.line_service import LineService

logger = get_logger("indicator_service")

# (max text length, duration in time units), checked in order
DURATION_BANDS = ((10, 3), (30, 4), (100, 5))
LONGEST_DURATION = 6

STATUS_MESSAGE_HOLD = 1.5

TYPING_MESSAGES = (
    "💭 กำลังคิดคำตอบ...",
    "🤔 กำลังวิเคราะห์...",
    "⚡ กำลังประมวลผล...",
    "🔍 กำลังค้นหาข้อมูล...",
)


class IndicatorMode(str, Enum):
    NATIVE = "native"  # platform loading animation
    STATUS_MESSAGE = "status_message"  # visible "thinking" message
    DELAY = "delay"  # silent pause


def duration_units(text: str) -> int:
    """Indicator duration in time units, banded on text length."""
    length = len(text or "")
    for max_length, units in DURATION_BANDS:
        if length <= max_length:
            return units
    return LONGEST_DURATION


class IndicatorPolicy:
    """Shows the user that a reply is being prepared. Never raises."""

    def __init__(
        self,
        line: LineService,
        mode: IndicatorMode = IndicatorMode.NATIVE,
        time_unit_seconds: float = 1.0,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.line = line
        self.mode = IndicatorMode(mode)
        self.time_unit_seconds = time_unit_seconds
        self.rng = rng or random.Random()
        self._sleep = sleep
        self.pending_tasks: set[asyncio.Task] = set()

    def duration_for(self, text: str) -> float:
        return duration_units(text) * self.time_unit_seconds

    async def indicate(self, user_id: Optional[str], text: str) -> None:
        if self.mode == IndicatorMode.STATUS_MESSAGE:
            await self._show_status_message(user_id)
            return

        duration = self.duration_for(text)
        if self.mode == IndicatorMode.NATIVE:
            # fire and forget: the platform call never extends the hold
            task = asyncio.create_task(self._start_loading(user_id, duration))
            self.pending_tasks.add(task)
            task.add_done_callback(self.pending_tasks.discard)
        await self._sleep(duration)

    async def aclose(self) -> None:
        """Wait for loading calls still in flight."""
        if self.pending_tasks:
            await asyncio.gather(*self.pending_tasks)

    async def _start_loading(self, user_id: Optional[str], duration: float) -> None:
        if not user_id:
            logger.debug("No user id on event, skipping loading animation")
            return
        try:
            await self.line.start_loading(user_id, duration)
            logger.info(
                "Loading animation started",
                extra={"context": {"user_id": user_id, "seconds": duration}},
            )
        except Exception as e:
            logger.warning(f"Loading animation failed, falling back to plain delay: {e}")

    async def _show_status_message(self, user_id: Optional[str]) -> None:
        message = self.rng.choice(TYPING_MESSAGES)
        if user_id:
            try:
                await self.line.push_message(user_id, message)
                logger.info(f"Showed typing status: {message}")
            except Exception as e:
                logger.warning(f"Error showing typing status: {e}")
        await self._sleep(STATUS_MESSAGE_HOLD * self.time_unit_seconds)
