"""Alert ingestion endpoint for device reports."""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from caretaker.alerts.schemas import AlertType
from caretaker.alerts.store import RemoteAlertStore
from caretaker.api.dependencies import get_alert_store
from caretaker.api.models import AlertIngestRequest, AlertIngestResponse, ErrorResponse
from caretaker.observability.metrics import get_metrics

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/alert",
    response_model=AlertIngestResponse,
    response_model_by_alias=True,
    responses={
        400: {"model": ErrorResponse, "description": "Missing alert type"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Report an alert",
    description=(
        "Create a new unacknowledged alert stamped with the current time. "
        "deviceId defaults to the configured device when omitted."
    ),
)
async def ingest_alert(
    request: AlertIngestRequest | None = None,
    store: RemoteAlertStore = Depends(get_alert_store),
) -> AlertIngestResponse:
    start_time = time.perf_counter()

    request = request or AlertIngestRequest()
    alert_type = (request.type or "").strip()
    if not alert_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing alert type",
        )

    try:
        alert_id = await store.create_alert(alert_type, request.device_id)
    except Exception as e:
        logger.error(f"Failed to create alert: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create alert: {str(e)}",
        )

    known = AlertType.parse(alert_type)
    get_metrics().record_alert_ingested(known.value if known else "other")
    logger.info(
        "Alert received",
        alert_id=alert_id,
        type=alert_type,
        device_id=request.device_id,
        latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )

    return AlertIngestResponse(alert_key=alert_id)
