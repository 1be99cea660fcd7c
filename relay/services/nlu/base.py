from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class NLUResult:
    text: Optional[str] = None
    intent: Optional[str] = None
    confidence: Optional[float] = None


class NLUError(Exception):
    """Base class for NLU backend failures."""

    code = "nlu_error"


class NLUUnavailableError(NLUError):
    """Backend unreachable, timed out, or missing credential material."""

    code = "unavailable"


class NLUInvalidConfigError(NLUError):
    """Invalid project id or the agent API is not enabled."""

    code = "invalid_config"


class NLUPermissionDeniedError(NLUError):
    """Credentials lack permission to query the agent."""

    code = "permission_denied"


class NLUProvider(ABC):
    """Abstract base class for NLU backends."""

    @abstractmethod
    def detect_intent(self, text: str, session_key: str, language_code: Optional[str] = None) -> NLUResult:
        """Resolve one message within the given session."""
        pass
