import json
from typing import Any, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import dialogflow
from google.oauth2 import service_account

from relay.logging_config import get_logger
from relay.services.nlu.base import (
    NLUError,
    NLUInvalidConfigError,
    NLUPermissionDeniedError,
    NLUProvider,
    NLUResult,
    NLUUnavailableError,
)

logger = get_logger("nlu.dialogflow")

DEFAULT_LANGUAGE_CODE = "th-TH"


class DialogflowProvider(NLUProvider):
    """Dialogflow ES agent queried through the sessions API."""

    def __init__(
        self,
        project_id: str,
        client: Any,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        timeout_seconds: Optional[float] = 10.0,
    ):
        self.project_id = project_id
        self.client = client
        self.language_code = language_code
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_credentials_info(cls, project_id: str, credentials_json: str, **kwargs) -> "DialogflowProvider":
        """Build from an inline service account JSON payload."""
        info = json.loads(credentials_json)
        credentials = service_account.Credentials.from_service_account_info(info)
        return cls(project_id, dialogflow.SessionsClient(credentials=credentials), **kwargs)

    @classmethod
    def from_credentials_file(cls, project_id: str, path: str, **kwargs) -> "DialogflowProvider":
        """Build from a service account key file. Raises FileNotFoundError if missing."""
        client = dialogflow.SessionsClient.from_service_account_file(path)
        return cls(project_id, client, **kwargs)

    def session_path(self, session_key: str) -> str:
        return self.client.session_path(self.project_id, session_key)

    def detect_intent(self, text: str, session_key: str, language_code: Optional[str] = None) -> NLUResult:
        session = self.session_path(session_key)
        text_input = dialogflow.TextInput(text=text, language_code=language_code or self.language_code)
        query_input = dialogflow.QueryInput(text=text_input)

        logger.debug(f"Dialogflow request: session={session}, text={text[:100]}")
        try:
            response = self.client.detect_intent(
                request={"session": session, "query_input": query_input},
                retry=None,  # one attempt, bounded by timeout
                timeout=self.timeout_seconds,
            )
        except google_exceptions.InvalidArgument as e:
            raise NLUInvalidConfigError(
                f"Invalid Google Cloud project id or Dialogflow not enabled: {e.message}"
            ) from e
        except google_exceptions.PermissionDenied as e:
            raise NLUPermissionDeniedError(
                f"Permission denied, check service account permissions: {e.message}"
            ) from e
        except FileNotFoundError as e:
            raise NLUUnavailableError(f"Service account key file not found: {e}") from e
        except (google_exceptions.GoogleAPICallError, google_exceptions.RetryError) as e:
            raise NLUUnavailableError(f"Dialogflow request failed: {e}") from e
        except Exception as e:
            raise NLUError(f"Unexpected Dialogflow error: {e}") from e

        result = response.query_result
        intent_name = result.intent.display_name if result.intent else None
        return NLUResult(
            text=result.fulfillment_text or None,
            intent=intent_name or None,
            confidence=result.intent_detection_confidence,
        )
