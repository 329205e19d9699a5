"""Form validation — deterministic validation layer for Arena Fund applications.

Usage:
    from arena.validators import validation_engine

    result = validation_engine.validate_investor_form_data(form)
    if not result.is_valid:
        # Return result.errors to the client
"""

from arena.validators.engine import (
    ValidationEngine,
    validate_form_data,
    validate_investor_field,
    validate_investor_form_data,
    validation_engine,
)
from arena.validators.field_validators import validate_email, validate_name
from arena.validators.models import ErrorCode, ValidationError, ValidationResult

__all__ = [
    "ValidationEngine",
    "validation_engine",
    "validate_form_data",
    "validate_investor_form_data",
    "validate_investor_field",
    "validate_email",
    "validate_name",
    "ValidationResult",
    "ValidationError",
    "ErrorCode",
]
