"""Validation Engine — orchestrates field validators and cross-field rules.

This is the main entry point for form validation. It runs the registered
validators against a snapshot of the submitted form and produces a
ValidationResult.

Usage:
    engine = ValidationEngine()
    result = engine.validate_investor_form_data(form)
    if not result.is_valid:
        # Show result.errors next to the offending fields
"""

import time
from typing import Any, Mapping, Optional

import structlog

from arena.config import Settings, get_settings
from arena.validators.base import BaseValidator
from arena.validators.cross_field_rules import cross_field_rules
from arena.validators.founder_validator import founder_field_validators
from arena.validators.investor_validator import investor_field_validators
from arena.validators.models import ErrorCode, ValidationError, ValidationResult

logger = structlog.get_logger()


class ValidationEngine:
    """Runs validators over form snapshots and produces a ValidationResult.

    Design principles:
        - Deterministic: same input → same output
        - Pure: the submitted form is copied, never mutated
        - Total: malformed input and crashing validators become errors, not exceptions
        - Observable: logs every validation run with timing (field names and codes only)
    """

    def __init__(
        self,
        founder_validators: Optional[list[BaseValidator]] = None,
        investor_validators: Optional[list[BaseValidator]] = None,
        cross_rules: Optional[list[BaseValidator]] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize with default validators or custom lists.

        Args:
            founder_validators: Founder field validators. Defaults to the full founder form.
            investor_validators: Investor field validators. Defaults to the full investor form.
            cross_rules: Investor cross-field rules. Defaults to all rules, configured from settings.
            settings: Settings used to build the defaults.
        """
        settings = settings or get_settings()
        self.founder_validators = (
            founder_validators if founder_validators is not None else founder_field_validators()
        )
        self.investor_validators = (
            investor_validators if investor_validators is not None
            else investor_field_validators(settings.MIN_VERIFICATION_FILE_BYTES)
        )
        self.cross_rules = cross_rules if cross_rules is not None else cross_field_rules(settings)

    def validate_form_data(self, form: Any) -> ValidationResult:
        """Validate a founder application. Field rules only."""
        return self._run("founder", self.founder_validators, _snapshot(form))

    def validate_investor_form_data(self, form: Any) -> ValidationResult:
        """Validate an investor application: every field rule, then every cross-field rule."""
        return self._run(
            "investor",
            [*self.investor_validators, *self.cross_rules],
            _snapshot(form),
        )

    def validate_investor_field(self, field: Any, value: Any, form: Any = None) -> ValidationResult:
        """Validate one investor field as the user edits it.

        Runs the field's own validator and every cross-field rule that reads the
        field, against ``{**form, field: value}``. The errors are always a subset
        of what ``validate_investor_form_data`` reports for the same snapshot.

        Args:
            field: Name of the field being edited
            value: Its new value
            form: The rest of the form as currently filled in

        Returns:
            ValidationResult for that field and the rules it participates in
        """
        if not isinstance(field, str) or not field:
            return ValidationResult()

        snapshot = _snapshot(form)
        snapshot[field] = value

        selected = [v for v in self.investor_validators if v.references(field)]
        selected += [rule for rule in self.cross_rules if rule.references(field)]
        return self._run("investor_field", selected, snapshot, field=field)

    def _run(
        self,
        form_type: str,
        validators: list[BaseValidator],
        snapshot: dict[str, Any],
        field: Optional[str] = None,
    ) -> ValidationResult:
        start_time = time.perf_counter()

        all_errors: list[ValidationError] = []
        validator_timings: dict[str, float] = {}

        for validator in validators:
            v_start = time.perf_counter()
            try:
                all_errors.extend(validator.validate(snapshot))
            except Exception as e:
                logger.error(
                    "validator_failed",
                    validator=validator.name,
                    form_type=form_type,
                    error_type=type(e).__name__,
                )
                # One broken validator must not take the whole form down
                all_errors.append(ValidationError(
                    field="general",
                    message=f"Validator '{validator.name}' failed",
                    code=ErrorCode.VALIDATOR_FAILURE,
                ))
            finally:
                v_duration = (time.perf_counter() - v_start) * 1000
                validator_timings[validator.name] = round(v_duration, 2)

        result = ValidationResult.build(all_errors)

        total_duration = (time.perf_counter() - start_time) * 1000
        log = logger.debug if field is not None else logger.info
        log(
            "validation_complete",
            form_type=form_type,
            field=field,
            is_valid=result.is_valid,
            total_errors=len(all_errors),
            error_codes=sorted(set(result.codes())),
            duration_ms=round(total_duration, 2),
            validator_timings=validator_timings if field is None else None,
        )

        return result

    def add_validator(self, validator: BaseValidator, form_type: str = "investor") -> None:
        """Add a custom validator to the founder or investor chain."""
        if form_type == "founder":
            self.founder_validators.append(validator)
        else:
            self.investor_validators.append(validator)

    def remove_validator(self, validator_name: str) -> None:
        """Remove a validator by name from every chain."""
        self.founder_validators = [v for v in self.founder_validators if v.name != validator_name]
        self.investor_validators = [v for v in self.investor_validators if v.name != validator_name]
        self.cross_rules = [v for v in self.cross_rules if v.name != validator_name]


def _snapshot(form: Any) -> dict[str, Any]:
    """Shallow copy of the form; anything that is not a mapping reads as empty."""
    if isinstance(form, Mapping):
        return {str(k): v for k, v in form.items()}
    return {}


# Module-level singleton
validation_engine = ValidationEngine()

validate_form_data = validation_engine.validate_form_data
validate_investor_form_data = validation_engine.validate_investor_form_data
validate_investor_field = validation_engine.validate_investor_field
