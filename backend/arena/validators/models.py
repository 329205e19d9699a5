"""Validation models — error codes, single findings, and the result envelope.

All validation is deterministic: same input → same output. The result shape is
what the HTTP layer and the UI consume: ``{isValid, errors: [{field, message, code}]}``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorCode(str, Enum):
    """Stable error codes for every validation rule.

    Naming convention: CATEGORY_SPECIFIC_ISSUE
    """

    # Field presence / format
    REQUIRED = "REQUIRED"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_LENGTH = "INVALID_LENGTH"
    MAX_LENGTH = "MAX_LENGTH"
    DISPOSABLE_EMAIL = "DISPOSABLE_EMAIL"

    # Closed-set membership
    INVALID_MODE = "INVALID_MODE"
    INVALID_INVESTOR_TYPE = "INVALID_INVESTOR_TYPE"
    INVALID_ACCREDITATION_STATUS = "INVALID_ACCREDITATION_STATUS"
    INVALID_CHECK_SIZE = "INVALID_CHECK_SIZE"
    INVALID_COUNTRY = "INVALID_COUNTRY"
    INVALID_STATE = "INVALID_STATE"
    INVALID_AREAS_OF_INTEREST = "INVALID_AREAS_OF_INTEREST"
    INVALID_VERIFICATION_METHOD = "INVALID_VERIFICATION_METHOD"

    # File references
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    FILE_TOO_SMALL = "FILE_TOO_SMALL"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    INVALID_FILE_EXTENSION = "INVALID_FILE_EXTENSION"
    SUSPICIOUS_FILENAME = "SUSPICIOUS_FILENAME"
    FILENAME_TOO_LONG = "FILENAME_TOO_LONG"
    HIDDEN_FILE = "HIDDEN_FILE"

    # Content security
    SUSPICIOUS_CONTENT = "SUSPICIOUS_CONTENT"
    REPETITIVE_CONTENT = "REPETITIVE_CONTENT"

    # Cross-field business rules
    ACCREDITATION_REQUIRED = "ACCREDITATION_REQUIRED"
    BUSINESS_LOGIC_MISMATCH = "BUSINESS_LOGIC_MISMATCH"
    JURISDICTION_MISMATCH = "JURISDICTION_MISMATCH"
    JURISDICTION_INSUFFICIENT = "JURISDICTION_INSUFFICIENT"
    RESTRICTED_JURISDICTION = "RESTRICTED_JURISDICTION"

    # Engine
    VALIDATOR_FAILURE = "VALIDATOR_FAILURE"


class ValidationError(BaseModel):
    """A single validation finding."""

    field: str
    message: str
    code: ErrorCode

    model_config = ConfigDict(use_enum_values=True, frozen=True)


class ValidationResult(BaseModel):
    """Aggregated outcome of a validation run.

    ``isValid`` is derived from ``errors`` so the two can never disagree.
    """

    errors: list[ValidationError] = Field(default_factory=list)

    @computed_field(alias="isValid")
    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @classmethod
    def build(cls, errors: list[ValidationError]) -> "ValidationResult":
        """Build a result from collected errors, preserving their order."""
        return cls(errors=list(errors))

    def errors_for(self, field: str) -> list[ValidationError]:
        """Errors reported on one field."""
        return [e for e in self.errors if e.field == field]

    def codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def to_response(self) -> dict:
        """JSON-ready ``{isValid, errors}`` payload."""
        return self.model_dump(by_alias=True)
