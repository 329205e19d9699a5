"""Base validator — abstract class implementing the Strategy Pattern.

Each validator is a standalone, independently testable unit that declares the
form fields it reads. The engine uses that declaration to pick the rules that
must be re-run when a single field changes.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from arena.validators.models import ValidationError, ErrorCode


class BaseValidator(ABC):
    """Abstract base for all form validators.

    Contract:
        - validate() is deterministic: same input → same output
        - validate() never mutates the form and never raises on malformed values
        - validate() returns a list of ValidationError (empty = no issues)
        - only fields listed in ``fields`` are read
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @property
    @abstractmethod
    def fields(self) -> frozenset[str]:
        """Form fields this validator reads."""
        ...

    @abstractmethod
    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        """Run validation checks against a form snapshot.

        Args:
            form: Field name → submitted value

        Returns:
            List of ValidationError findings (empty if no issues)
        """
        ...

    def references(self, field: str) -> bool:
        return field in self.fields

    # ── Helper Methods ──

    def _error(self, code: ErrorCode, field: str, message: str) -> ValidationError:
        """Convenience method to create a ValidationError."""
        return ValidationError(field=field, message=message, code=code)

    def _text(self, form: Mapping[str, Any], field: str) -> str:
        """Stripped string value of a field; anything that is not a string reads as empty."""
        return text_value(form.get(field))

    def _code(self, form: Mapping[str, Any], field: str) -> str:
        """Upper-cased code value (country, state)."""
        return self._text(form, field).upper()


def text_value(value: Any) -> str:
    """Stripped string, or '' for missing and non-string values."""
    if isinstance(value, str):
        return value.strip()
    return ""


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty containers."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False
