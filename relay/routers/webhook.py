from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from relay.config import Settings
from relay.dependencies import get_pipeline, get_settings
from relay.logging_config import get_logger
from relay.schemas.line import LineWebhookRequest
from relay.schemas.webhook import EventOutcomeSchema, WebhookSummary
from relay.services.pipeline_service import EventOutcome, MessagePipeline
from relay.services.signature_service import verify_signature
from relay.services.state_machine import EventState

logger = get_logger("webhook")

router = APIRouter()


def build_summary(outcomes: list[EventOutcome]) -> WebhookSummary:
    return WebhookSummary(
        success=True,
        processed=len(outcomes),
        replied=sum(1 for o in outcomes if o.state == EventState.REPLIED),
        skipped=sum(1 for o in outcomes if o.state == EventState.SKIPPED),
        failed=sum(1 for o in outcomes if o.state == EventState.FAILED),
        results=[EventOutcomeSchema(**o.to_dict()) for o in outcomes],
    )


@router.get("/webhook")
async def webhook_liveness():
    return {"status": "ok"}


@router.post("/webhook", response_model=WebhookSummary)
async def handle_line_webhook(
    request: Request,
    x_line_signature: Optional[str] = Header(default=None),
    pipeline: MessagePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    """
    Handle a LINE webhook delivery:
    - verify the channel signature
    - run every event through the message pipeline concurrently
    - return a per-event summary
    """
    raw_body = await request.body()

    if settings.line_verify_signature:
        if not verify_signature(settings.line_channel_secret, raw_body, x_line_signature):
            logger.warning("Rejected webhook with invalid signature")
            raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        delivery = LineWebhookRequest.model_validate_json(raw_body)
    except ValidationError as e:
        logger.error(f"Malformed webhook body: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    logger.info(
        "Received webhook",
        extra={"context": {"destination": delivery.destination, "events": len(delivery.events)}},
    )

    try:
        outcomes = await pipeline.handle_delivery(delivery.events)
    except Exception as e:
        logger.error(f"Error handling webhook: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    summary = build_summary(outcomes)
    logger.info(
        "Webhook processed",
        extra={"context": {"replied": summary.replied, "skipped": summary.skipped, "failed": summary.failed}},
    )
    return summary
