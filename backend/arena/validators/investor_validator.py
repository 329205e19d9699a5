"""Investor application fields — one FieldValidator per declared field.

Fields whose requirement depends on other fields (state, and the 506(c)
verification block) only get their standalone format checks here; presence is
enforced by the cross-field rules.
"""

from typing import Any, Mapping

from arena.validators.base import BaseValidator, is_blank
from arena.validators.field_validators import (
    FieldValidator,
    check_file,
    check_text_content,
    email_field,
    must_confirm,
    name_field,
    optional_choice,
    optional_text,
    required_choice,
    required_text,
)
from arena.validators.models import ErrorCode, ValidationError
from arena.validators.reference_data import (
    ACCREDITATION_STATUSES,
    AREAS_OF_INTEREST,
    CHECK_SIZES,
    INVESTOR_MODES,
    INVESTOR_TYPES,
    SUPPORTED_COUNTRIES,
    VERIFICATION_ALLOWED_EXTENSIONS,
    VERIFICATION_ALLOWED_TYPES,
    VERIFICATION_MAX_FILE_SIZE,
    VERIFICATION_METHODS,
)

ENTITY_NAME_MIN_LENGTH = 3


def check_areas_of_interest(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
    """Non-empty subset of the supported focus areas."""
    if is_blank(value):
        return [ValidationError(
            field="areasOfInterest",
            message="Please select at least one area of interest",
            code=ErrorCode.REQUIRED,
        )]
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(area, str) and area in AREAS_OF_INTEREST for area in value
    ):
        return [ValidationError(
            field="areasOfInterest",
            message="Please select valid areas of interest",
            code=ErrorCode.INVALID_AREAS_OF_INTEREST,
        )]
    return []


def check_entity_name(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
    if is_blank(value):
        return []
    if not isinstance(value, str):
        return [ValidationError(field="entityName", message="Entity name must be text", code=ErrorCode.INVALID_FORMAT)]
    name = value.strip()
    if len(name) < ENTITY_NAME_MIN_LENGTH:
        return [ValidationError(
            field="entityName",
            message="Please provide the full legal name of your entity",
            code=ErrorCode.INVALID_LENGTH,
        )]
    return check_text_content(name, "entityName")


def verification_file_check(min_size: int):
    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if is_blank(value):
            return []
        return check_file(
            value,
            "verificationFile",
            max_size=VERIFICATION_MAX_FILE_SIZE,
            allowed_types=VERIFICATION_ALLOWED_TYPES,
            allowed_extensions=VERIFICATION_ALLOWED_EXTENSIONS,
            min_size=min_size,
        )

    return check


def investor_field_validators(min_verification_file_bytes: int = 1024) -> list[BaseValidator]:
    """Field validators for the investor application, in form order."""
    return [
        FieldValidator("mode", optional_choice(
            "mode", INVESTOR_MODES, ErrorCode.INVALID_MODE, "Please select a valid offering type",
        )),

        # Basic investor info
        FieldValidator("fullName", name_field("fullName")),
        FieldValidator("email", email_field("email")),
        FieldValidator("country", required_choice(
            "country", SUPPORTED_COUNTRIES,
            required_message="Country is required",
            invalid_code=ErrorCode.INVALID_COUNTRY,
            invalid_message="Please select a supported country",
            normalize=str.upper,
        )),
        FieldValidator("investorType", required_choice(
            "investorType", INVESTOR_TYPES,
            required_message="Please select your investor type",
            invalid_code=ErrorCode.INVALID_INVESTOR_TYPE,
            invalid_message="Please select a valid investor type",
        )),
        FieldValidator("accreditationStatus", required_choice(
            "accreditationStatus", ACCREDITATION_STATUSES,
            required_message="Please indicate your accreditation status",
            invalid_code=ErrorCode.INVALID_ACCREDITATION_STATUS,
            invalid_message="Please select a valid accreditation status",
        )),

        # Investment preferences
        FieldValidator("checkSize", required_choice(
            "checkSize", CHECK_SIZES,
            required_message="Please select your investment check size",
            invalid_code=ErrorCode.INVALID_CHECK_SIZE,
            invalid_message="Please select a valid check size",
        )),
        FieldValidator("areasOfInterest", check_areas_of_interest),
        FieldValidator("referralSource", optional_text("referralSource", max_length=500)),

        # 506(c) verification block
        FieldValidator("verificationMethod", optional_choice(
            "verificationMethod", VERIFICATION_METHODS,
            ErrorCode.INVALID_VERIFICATION_METHOD, "Please select a valid verification method",
        )),
        FieldValidator("verificationFile", verification_file_check(min_verification_file_bytes)),
        FieldValidator("entityName", check_entity_name),
        FieldValidator("jurisdiction", optional_text("jurisdiction", max_length=200)),
        FieldValidator("custodianInfo", optional_text("custodianInfo", max_length=1000)),

        # Consent
        FieldValidator("consentConfirm", must_confirm(
            "consentConfirm", "You must confirm your consent to proceed",
        )),
        FieldValidator("signature", required_text(
            "signature", "Digital signature is required",
            min_length=2, min_length_message="Please type your full name as your signature",
        )),
    ]
