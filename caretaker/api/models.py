"""
Request and response models for the ingestion gateway.
"""

from pydantic import BaseModel, ConfigDict, Field


class AlertIngestRequest(BaseModel):
    """Inbound device report.

    ``type`` is optional at the schema level so a missing value can be
    rejected with a 400 rather than a validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str | None = Field(
        default=None,
        description="Alert type token, e.g. FALL_DETECTED",
    )
    device_id: str | None = Field(
        default=None,
        alias="deviceId",
        description="Reporting device; defaults to the configured device id",
    )


class AlertIngestResponse(BaseModel):
    """Response model for a created alert."""

    model_config = ConfigDict(populate_by_name=True)

    alert_key: str = Field(
        ...,
        alias="alertKey",
        description="Store-assigned id of the new alert",
    )


class ComponentHealth(BaseModel):
    """Health status of one infrastructure component."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency")
    details: dict | None = Field(default=None, description="Error details")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or unhealthy",
    )
    version: str = Field(..., description="Service version")
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-component health",
    )


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error category",
    )
