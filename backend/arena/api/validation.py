"""Standalone email and name checks, for forms that validate as the user types."""

from fastapi import APIRouter

from arena.models.requests import EmailValidationRequest, NameValidationRequest
from arena.validators import validate_email, validate_name

router = APIRouter()


@router.post("/validate/email")
async def check_email(body: EmailValidationRequest):
    return validate_email(body.email).to_response()


@router.post("/validate/name")
async def check_name(body: NameValidationRequest):
    return validate_name(body.name).to_response()
