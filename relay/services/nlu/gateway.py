import asyncio
import uuid
from typing import Optional

from relay.config import Settings
from relay.logging_config import get_logger
from relay.services.nlu.base import NLUProvider, NLUResult
from relay.services.nlu.dialogflow_provider import DialogflowProvider

logger = get_logger("nlu.gateway")


def derive_session_key(user_id: Optional[str]) -> str:
    """Use the platform user id, or a fresh id when the source carries none."""
    if user_id:
        return user_id
    return uuid.uuid4().hex


class NLUGateway:
    """One request/response exchange with the NLU backend per message.

    Readiness is fixed at construction. Callers check `ready` before
    calling `query`; errors from the provider propagate unchanged.
    """

    def __init__(self, provider: Optional[NLUProvider] = None, reason: Optional[str] = None):
        self._provider = provider
        self.reason = reason if provider is None else None

    @property
    def ready(self) -> bool:
        return self._provider is not None

    async def query(self, text: str, session_key: str) -> NLUResult:
        if self._provider is None:
            raise RuntimeError("NLU gateway is not ready")
        return await asyncio.to_thread(self._provider.detect_intent, text, session_key)


def build_nlu_gateway(settings: Settings) -> NLUGateway:
    """Create the gateway once at startup.

    Inline JSON credentials win over a credentials file path. Any problem
    leaves the gateway not ready instead of failing startup.
    """
    if not settings.google_project_id:
        logger.warning("GOOGLE_PROJECT_ID is not set; NLU disabled, fallback replies only")
        return NLUGateway(reason="missing_project_id")

    options = {
        "language_code": settings.dialogflow_language_code,
        "timeout_seconds": settings.nlu_timeout_seconds,
    }

    if settings.google_credentials_json:
        try:
            provider = DialogflowProvider.from_credentials_info(
                settings.google_project_id, settings.google_credentials_json, **options
            )
        except Exception as e:
            logger.error(f"Invalid inline Google credentials: {e}")
            return NLUGateway(reason="invalid_credentials_json")
        logger.info("Dialogflow initialized from inline credentials")
        return NLUGateway(provider)

    if settings.google_application_credentials:
        try:
            provider = DialogflowProvider.from_credentials_file(
                settings.google_project_id, settings.google_application_credentials, **options
            )
        except FileNotFoundError:
            logger.error(
                "Service account key file not found",
                extra={"context": {"path": settings.google_application_credentials}},
            )
            return NLUGateway(reason="credentials_file_not_found")
        except Exception as e:
            logger.error(f"Failed to load Google credentials file: {e}")
            return NLUGateway(reason="invalid_credentials_file")
        logger.info("Dialogflow initialized from credentials file")
        return NLUGateway(provider)

    logger.warning("No Google credentials configured; NLU disabled, fallback replies only")
    return NLUGateway(reason="missing_credentials")
