from fastapi import Request

from relay.config import Settings, settings
from relay.services.pipeline_service import MessagePipeline


def get_settings() -> Settings:
    return settings


def get_pipeline(request: Request) -> MessagePipeline:
    """Pipeline built at startup and kept on app.state."""
    return request.app.state.pipeline
