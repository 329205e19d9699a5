"""Applications API — submit founder/investor applications, live field validation, options."""

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

import structlog

from arena.config import get_settings
from arena.models.requests import FieldValidationRequest
from arena.models.responses import (
    ApplicationResponse,
    OptionItem,
    OptionsResponse,
    SubmissionRecord,
    SubmissionResponse,
    ValidationFailedResponse,
)
from arena.services.rate_limiter import TokenBucketRateLimiter
from arena.services.submission_store import StoreUnavailableError, SubmissionStore
from arena.validators import validation_engine
from arena.validators.models import ValidationResult
from arena.validators.reference_data import (
    ACCREDITATION_STATUSES,
    AREAS_OF_INTEREST,
    CHECK_SIZES,
    INVESTOR_MODES,
    INVESTOR_TYPES,
    SUPPORTED_COUNTRIES,
    US_STATES,
    VERIFICATION_METHODS,
)

logger = structlog.get_logger()

router = APIRouter()

HONEYPOT_FIELD = "websiteHoneypot"
FILE_METADATA_KEYS = ("name", "size", "type")


def _generate_submission_id(application_type: str) -> str:
    """Generate a short, readable submission ID."""
    prefix = "fnd" if application_type == "founder" else "inv"
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _client_ip(request: Request) -> str:
    """The address rate limits and records are keyed on.

    X-Forwarded-For is only read when the direct peer is a trusted proxy. The
    header is walked from the right and the first hop that is not itself a
    trusted proxy wins.
    """
    peer = request.client.host if request.client else "unknown"
    trusted = set(get_settings().TRUSTED_PROXIES)
    if peer not in trusted:
        return peer

    forwarded = request.headers.get("x-forwarded-for", "")
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in trusted:
            return hop
    return peer


def _rate_limiter(request: Request) -> TokenBucketRateLimiter:
    return request.app.state.rate_limiter


def _store(request: Request) -> SubmissionStore:
    return request.app.state.submission_store


def _clean_form(form: Mapping[str, Any]) -> dict[str, Any]:
    """Drop the honeypot and reduce file references to their metadata."""
    cleaned = {}
    for key, value in form.items():
        if key == HONEYPOT_FIELD:
            continue
        if isinstance(value, Mapping) and "name" in value and "size" in value:
            value = {k: value.get(k) for k in FILE_METADATA_KEYS}
        cleaned[key] = value
    return cleaned


async def _read_form(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail={"error": "Request body must be valid JSON"})
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail={"error": "Request body must be a JSON object"})
    return body


async def _submit(request: Request, application_type: str, validate) -> JSONResponse:
    form = await _read_form(request)
    client_ip = _client_ip(request)

    # Bots fill in the hidden field; humans never see it
    if form.get(HONEYPOT_FIELD):
        logger.warning("submission_rejected", reason="honeypot", application_type=application_type)
        raise HTTPException(status_code=400, detail={"error": "Invalid submission"})

    limiter = _rate_limiter(request)
    if not limiter.allow_request(client_ip):
        retry_after = int(limiter.reset_time(client_ip)) + 1
        logger.warning("rate_limited", application_type=application_type, retry_after_seconds=retry_after)
        raise HTTPException(
            status_code=429,
            detail={
                "error": "rate_limit_exceeded",
                "message": "Too many submissions. Please wait before trying again.",
                "retry_after_seconds": retry_after,
            },
            headers={"Retry-After": str(retry_after), "X-RateLimit-Remaining": "0"},
        )

    rate_headers = {"X-RateLimit-Remaining": str(limiter.remaining_tokens(client_ip))}

    result: ValidationResult = validate(form)
    if not result.is_valid:
        logger.info(
            "submission_rejected",
            reason="validation",
            application_type=application_type,
            fields=sorted({e.field for e in result.errors}),
        )
        body = ValidationFailedResponse(validationErrors=result.errors)
        return JSONResponse(status_code=400, content=body.model_dump(mode="json"), headers=rate_headers)

    created_at = datetime.now(timezone.utc)
    record = SubmissionRecord(
        id=_generate_submission_id(application_type),
        applicationType=application_type,
        createdAt=created_at,
        clientIp=client_ip,
        userAgent=request.headers.get("user-agent"),
        data=_clean_form(form),
    )

    try:
        await _store(request).save(record.model_dump(mode="json"))
    except StoreUnavailableError:
        raise HTTPException(
            status_code=503,
            detail={
                "error": "storage_unavailable",
                "message": "We could not save your application. Please try again shortly.",
            },
        )

    response = SubmissionResponse(id=record.id, applicationType=application_type, createdAt=created_at)
    return JSONResponse(status_code=201, content=response.model_dump(mode="json"), headers=rate_headers)


# ─── Option labels ───

MODE_LABELS = {
    "506b": "506(b): accredited and sophisticated investors",
    "506c": "506(c): verified accredited investors only",
}

INVESTOR_TYPE_LABELS = {
    "individual": "Individual",
    "family-office": "Family office",
    "institutional": "Institutional",
    "other": "Other",
}

ACCREDITATION_LABELS = {"yes": "Yes", "no": "No", "unsure": "Not sure"}

CHECK_SIZE_LABELS = {
    "25k-50k": "$25K - $50K",
    "50k-250k": "$50K - $250K",
    "250k-plus": "$250K+",
}

AREA_LABELS = {
    "enterprise-ai": "Enterprise AI",
    "healthcare-ai": "Healthcare AI",
    "fintech-ai": "Fintech AI",
    "hi-tech": "Hi-tech",
}

VERIFICATION_LABELS = {
    "letter": "Verification letter (CPA, attorney, or RIA)",
    "third-party": "Third-party verification service",
    "bank-brokerage": "Bank or brokerage statements",
}


def _options(values, labels) -> list[OptionItem]:
    return [OptionItem(value=v, label=labels.get(v, v)) for v in values]


@router.get("/applications/options", response_model=OptionsResponse)
async def get_options():
    """Closed option sets for the investor form."""
    return OptionsResponse(
        modes=_options(INVESTOR_MODES, MODE_LABELS),
        investorTypes=_options(INVESTOR_TYPES, INVESTOR_TYPE_LABELS),
        accreditationStatuses=_options(ACCREDITATION_STATUSES, ACCREDITATION_LABELS),
        checkSizes=_options(CHECK_SIZES, CHECK_SIZE_LABELS),
        areasOfInterest=_options(AREAS_OF_INTEREST, AREA_LABELS),
        verificationMethods=_options(VERIFICATION_METHODS, VERIFICATION_LABELS),
        countries=list(SUPPORTED_COUNTRIES),
        usStates=sorted(US_STATES),
    )


@router.post("/applications/founder", status_code=201, response_model=SubmissionResponse)
async def submit_founder_application(request: Request):
    """Validate and store a founder application."""
    return await _submit(request, "founder", validation_engine.validate_form_data)


@router.post("/applications/investor", status_code=201, response_model=SubmissionResponse)
async def submit_investor_application(request: Request):
    """Validate and store an investor application (506(b) or 506(c))."""
    return await _submit(request, "investor", validation_engine.validate_investor_form_data)


@router.post("/applications/investor/validate-field")
async def validate_investor_field(body: FieldValidationRequest):
    """Real-time validation of one investor field against the current form."""
    result = validation_engine.validate_investor_field(body.field, body.value, body.form)
    return result.to_response()


@router.get("/applications/{submission_id}", response_model=ApplicationResponse)
async def get_application(submission_id: str, request: Request):
    """Fetch a stored application. Client address and user agent stay server-side."""
    try:
        record = await _store(request).get(submission_id)
    except StoreUnavailableError:
        raise HTTPException(status_code=503, detail={"error": "storage_unavailable"})
    if record is None:
        raise HTTPException(status_code=404, detail=f"Application {submission_id} not found")
    return record
