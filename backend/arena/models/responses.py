"""API response models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from arena.validators.models import ValidationError


class SubmissionResponse(BaseModel):
    """Response after an application is accepted."""

    id: str
    applicationType: Literal["founder", "investor"]
    status: str = "received"
    createdAt: datetime


class ValidationFailedResponse(BaseModel):
    """Response when an application fails validation."""

    error: str = "Validation failed"
    validationErrors: list[ValidationError]


class OptionItem(BaseModel):
    value: str
    label: str


class OptionsResponse(BaseModel):
    """Closed option sets the investor form offers."""

    modes: list[OptionItem]
    investorTypes: list[OptionItem]
    accreditationStatuses: list[OptionItem]
    checkSizes: list[OptionItem]
    areasOfInterest: list[OptionItem]
    verificationMethods: list[OptionItem]
    countries: list[str]
    usStates: list[str]


class SubmissionRecord(BaseModel):
    """A stored application."""

    id: str
    applicationType: Literal["founder", "investor"]
    createdAt: datetime
    clientIp: Optional[str] = None
    userAgent: Optional[str] = None
    data: dict


class ApplicationResponse(BaseModel):
    """A stored application as returned to API clients, without request metadata."""

    id: str
    applicationType: Literal["founder", "investor"]
    createdAt: datetime
    data: dict


class HealthDependency(BaseModel):
    """Health status of a single dependency."""

    status: Literal["healthy", "unhealthy", "degraded"]
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """System health check response."""

    status: Literal["healthy", "unhealthy", "degraded"]
    version: str = "1.0.0"
    uptime_seconds: float
    dependencies: dict[str, HealthDependency]
