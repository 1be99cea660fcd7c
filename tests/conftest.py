import random
from unittest.mock import AsyncMock, Mock

import pytest

from relay.services.fallback_service import FallbackResponder
from relay.services.indicator_service import IndicatorMode, IndicatorPolicy
from relay.services.line_service import LineService
from relay.services.nlu import NLUGateway, NLUResult
from relay.services.pipeline_service import MessagePipeline


@pytest.fixture
def line():
    """Mock LINE client; every call succeeds by default."""
    mock = Mock(spec=LineService)
    mock.reply_message = AsyncMock(return_value={})
    mock.push_message = AsyncMock(return_value={})
    mock.start_loading = AsyncMock(return_value={})
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def indicator(line, sleep):
    return IndicatorPolicy(line, mode=IndicatorMode.NATIVE, rng=random.Random(0), sleep=sleep)


@pytest.fixture
def unready_gateway():
    return NLUGateway(reason="missing_credentials")


@pytest.fixture
def provider():
    """Mock NLU provider answering "ok"."""
    mock = Mock()
    mock.detect_intent.return_value = NLUResult(text="ok", intent="Default Welcome Intent", confidence=0.9)
    return mock


@pytest.fixture
def ready_gateway(provider):
    return NLUGateway(provider)


@pytest.fixture
def make_pipeline(line, indicator):
    def _make(gateway):
        return MessagePipeline(
            line=line,
            gateway=gateway,
            indicator=indicator,
            fallback=FallbackResponder(random.Random(0)),
        )

    return _make


@pytest.fixture
def mock_env(monkeypatch):
    """Set test environment variables."""
    monkeypatch.setenv("LINE_CHANNEL_ACCESS_TOKEN", "test-token")
    monkeypatch.setenv("LINE_CHANNEL_SECRET", "test-secret")
    monkeypatch.setenv("GOOGLE_PROJECT_ID", "test-project")
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("GOOGLE_CREDENTIALS_JSON", raising=False)


@pytest.fixture
def make_text_event():
    def _make(text, user_id="U123", reply_token="reply-token-1"):
        return {
            "type": "message",
            "replyToken": reply_token,
            "source": {"type": "user", "userId": user_id},
            "message": {"id": "m1", "type": "text", "text": text},
            "timestamp": 1702000000000,
        }

    return _make
