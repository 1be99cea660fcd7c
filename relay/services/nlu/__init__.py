from relay.services.nlu.base import (
    NLUError,
    NLUInvalidConfigError,
    NLUPermissionDeniedError,
    NLUProvider,
    NLUResult,
    NLUUnavailableError,
)
from relay.services.nlu.dialogflow_provider import DialogflowProvider
from relay.services.nlu.gateway import NLUGateway, build_nlu_gateway, derive_session_key

__all__ = [
    "DialogflowProvider",
    "NLUError",
    "NLUGateway",
    "NLUInvalidConfigError",
    "NLUPermissionDeniedError",
    "NLUProvider",
    "NLUResult",
    "NLUUnavailableError",
    "build_nlu_gateway",
    "derive_session_key",
]
