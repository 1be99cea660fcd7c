import math
from typing import Optional

import httpx

from relay.logging_config import get_logger

logger = get_logger("line_service")

MAX_TEXT_LENGTH = 5000
MIN_LOADING_SECONDS = 5
MAX_LOADING_SECONDS = 60
LOADING_SECONDS_STEP = 5


class LineAPIError(Exception):
    """Base error for failed LINE Messaging API calls."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DeliveryError(LineAPIError):
    """Reply or push message could not be delivered."""


class IndicatorError(LineAPIError):
    """Loading animation could not be started."""


def normalize_loading_seconds(seconds: float) -> int:
    """Round up to a loading duration the platform accepts (5..60, step 5)."""
    steps = math.ceil(max(seconds, 0) / LOADING_SECONDS_STEP)
    value = steps * LOADING_SECONDS_STEP
    return min(max(value, MIN_LOADING_SECONDS), MAX_LOADING_SECONDS)


def build_text_message(text: str) -> dict:
    return {"type": "text", "text": text[:MAX_TEXT_LENGTH]}


class LineService:
    """Service for talking to the LINE Messaging API."""

    BASE_URL = "https://api.line.me/v2/bot"

    def __init__(
        self,
        channel_access_token: str,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.channel_access_token = channel_access_token
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def _make_request(self, path: str, data: dict, error_cls: type[LineAPIError]) -> dict:
        """POST to the Messaging API, raising error_cls on any failure."""
        url = f"{self.base_url}/{path}"
        headers = {
            "Authorization": f"Bearer {self.channel_access_token}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._client.post(url, headers=headers, json=data)
        except httpx.HTTPError as e:
            logger.error(f"LINE API transport error on {path}: {e}")
            raise error_cls(f"LINE API request failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                "LINE API returned an error",
                extra={"context": {"path": path, "status": response.status_code, "body": response.text[:500]}},
            )
            raise error_cls(
                f"LINE API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    async def reply_message(self, reply_token: str, text: str) -> dict:
        """Reply to an inbound event. The reply token is single-use."""
        data = {
            "replyToken": reply_token,
            "messages": [build_text_message(text)],
        }
        return await self._make_request("message/reply", data, DeliveryError)

    async def push_message(self, user_id: str, text: str) -> dict:
        """Send a proactive message to a user."""
        data = {
            "to": user_id,
            "messages": [build_text_message(text)],
        }
        return await self._make_request("message/push", data, DeliveryError)

    async def start_loading(self, chat_id: str, seconds: float) -> dict:
        """Show the loading animation in a one-on-one chat."""
        data = {
            "chatId": chat_id,
            "loadingSeconds": normalize_loading_seconds(seconds),
        }
        return await self._make_request("chat/loading/start", data, IndicatorError)
