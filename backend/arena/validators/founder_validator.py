"""Founder application fields — one FieldValidator per declared field.

The founder form has no cross-field business rules. The pitch deck is the one
either/or requirement (upload, file reference, or link) and is expressed in the
deck field checks themselves, which read the sibling deck fields from the snapshot.
"""

from typing import Any, Mapping

from arena.validators.base import BaseValidator, is_blank, text_value
from arena.validators.field_validators import (
    FieldValidator,
    check_file,
    email_field,
    is_valid_url,
    must_confirm,
    name_field,
    optional_text,
    required_selection,
    required_text,
    url_field,
)
from arena.validators.models import ErrorCode, ValidationError
from arena.validators.reference_data import (
    DECK_ALLOWED_EXTENSIONS,
    DECK_ALLOWED_TYPES,
    DECK_MAX_FILE_SIZE,
)

DECK_FIELDS = ("deckFile", "deckFileRef", "deckLink")
DECK_REQUIRED_MESSAGE = "Pitch deck is required (either upload a file or provide a URL)"


def _has_deck(form: Mapping[str, Any]) -> bool:
    return (
        not is_blank(form.get("deckFile"))
        or bool(text_value(form.get("deckFileRef")))
        or bool(text_value(form.get("deckLink")))
    )


def _check_deck_file(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
    if is_blank(value):
        if _has_deck(form):
            return []
        return [ValidationError(field="deckFile", message=DECK_REQUIRED_MESSAGE, code=ErrorCode.REQUIRED)]
    return check_file(
        value,
        "deckFile",
        max_size=DECK_MAX_FILE_SIZE,
        allowed_types=DECK_ALLOWED_TYPES,
        allowed_extensions=DECK_ALLOWED_EXTENSIONS,
        type_label="PDF, JPEG, and PNG",
    )


def _check_deck_link(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
    if is_blank(value):
        if _has_deck(form):
            return []
        return [ValidationError(field="deckLink", message=DECK_REQUIRED_MESSAGE, code=ErrorCode.REQUIRED)]
    if not isinstance(value, str) or not is_valid_url(value):
        return [ValidationError(
            field="deckLink",
            message="Please enter a valid URL for your pitch deck",
            code=ErrorCode.INVALID_FORMAT,
        )]
    return []


def founder_field_validators() -> list[BaseValidator]:
    """Field validators for the founder application, in form order."""
    return [
        # Founder & team
        FieldValidator("fullName", name_field("fullName")),
        FieldValidator("role", required_text("role", "Your role at the company is required")),
        FieldValidator("email", email_field("email")),
        FieldValidator("phone", optional_text("phone", max_length=40)),
        FieldValidator("linkedin", url_field("linkedin", "Please enter a valid LinkedIn URL")),
        FieldValidator("companyName", required_text("companyName", "Company name is required")),
        FieldValidator("website", url_field(
            "website", "Please enter a valid website URL", required_message="Company website is required",
        )),

        # Startup snapshot
        FieldValidator("stage", required_selection("stage", "Please select your startup stage")),
        FieldValidator("industry", required_selection("industry", "Please select your industry")),
        FieldValidator("oneLineDescription", required_text(
            "oneLineDescription", "One-line description is required", max_length=150,
        )),
        FieldValidator("problem", required_text("problem", "Problem description is required", max_length=300)),
        FieldValidator("solution", required_text("solution", "Solution description is required", max_length=300)),
        FieldValidator("traction", required_selection("traction", "Please select your traction stage")),
        FieldValidator("revenue", optional_text("revenue")),

        # Pitch deck
        FieldValidator("deckFile", _check_deck_file, depends_on=DECK_FIELDS),
        FieldValidator("deckLink", _check_deck_link, depends_on=DECK_FIELDS),
        FieldValidator("videoPitch", url_field("videoPitch", "Please enter a valid URL for your video pitch")),

        # Validation & edge
        FieldValidator("enterpriseEngagement", required_selection(
            "enterpriseEngagement", "Please indicate your enterprise engagement status",
        )),
        FieldValidator("keyHighlights", optional_text("keyHighlights")),

        # Funding
        FieldValidator("capitalRaised", optional_text("capitalRaised")),
        FieldValidator("capitalRaisedAmount", optional_text("capitalRaisedAmount")),
        FieldValidator("capitalSought", required_selection(
            "capitalSought", "Please select the capital amount you are seeking",
        )),

        # Consent
        FieldValidator("accuracyConfirm", must_confirm(
            "accuracyConfirm", "You must confirm the accuracy of your information",
        )),
        FieldValidator("understandingConfirm", must_confirm(
            "understandingConfirm", "You must confirm your understanding of the application process",
        )),
        FieldValidator("signature", required_text(
            "signature", "Digital signature is required",
            min_length=2, min_length_message="Please type your full name as your signature",
        )),
    ]
