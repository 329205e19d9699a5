"""Cross-field rules — investor business logic spanning several fields.

Every rule runs on every full validation; errors accumulate and no rule
suppresses another. Each rule declares the fields it reads so that single-field
validation only re-runs the rules a change can affect.
"""

import re
from typing import Any, Iterable, Mapping, Optional

from arena.config import Settings, get_settings
from arena.validators.base import BaseValidator, is_blank
from arena.validators.models import ErrorCode, ValidationError
from arena.validators.reference_data import (
    ACCREDITATION_STATUSES,
    AUSTRALIAN_STATES,
    CANADIAN_PROVINCES,
    CHECK_SIZES,
    REGION_REQUIRED_COUNTRIES,
    UK_JURISDICTIONS,
    US_NATIONAL_NAMES,
    US_STATES,
)

DEFAULT_MODE = "506b"
ACCREDITED_ONLY_MODE = "506c"
PROFESSIONAL_INVESTOR_TYPES = ("institutional", "family-office")

_UK_JURISDICTION_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(name) for name in UK_JURISDICTIONS) + r")\b",
    re.I,
)


class CrossFieldRule(BaseValidator):
    """Base for rules whose field set is fixed per class."""

    FIELDS: frozenset[str] = frozenset()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def fields(self) -> frozenset[str]:
        return self.FIELDS

    def _mode(self, form: Mapping[str, Any]) -> str:
        """Offering mode, defaulting to 506(b) when omitted."""
        return self._text(form, "mode") or DEFAULT_MODE


class ModeRequirementsRule(CrossFieldRule):
    """506(c) requires the verification block to be filled in."""

    FIELDS = frozenset({
        "mode", "verificationMethod", "verificationFile", "verificationFileRef",
        "entityName", "jurisdiction",
    })

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        if self._mode(form) != ACCREDITED_ONLY_MODE:
            return []

        errors = []
        if not self._text(form, "verificationMethod"):
            errors.append(self._error(
                ErrorCode.REQUIRED, "verificationMethod",
                "Verification method is required for 506(c) offerings",
            ))
        if is_blank(form.get("verificationFile")) and not self._text(form, "verificationFileRef"):
            errors.append(self._error(
                ErrorCode.REQUIRED, "verificationFile",
                "Verification document is required for 506(c) offerings",
            ))
        if not self._text(form, "entityName"):
            errors.append(self._error(
                ErrorCode.REQUIRED, "entityName",
                "Legal name or entity name is required for 506(c) offerings",
            ))
        if not self._text(form, "jurisdiction"):
            errors.append(self._error(
                ErrorCode.REQUIRED, "jurisdiction",
                "Jurisdiction of residence is required for 506(c) offerings",
            ))
        return errors


class AccreditationRequirementRule(CrossFieldRule):
    """506(c) offerings are open to verified accredited investors only."""

    FIELDS = frozenset({"mode", "accreditationStatus"})

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        status = self._text(form, "accreditationStatus")
        if self._mode(form) == ACCREDITED_ONLY_MODE and status and status != "yes":
            return [self._error(
                ErrorCode.ACCREDITATION_REQUIRED, "accreditationStatus",
                "506(c) offerings require accredited investor status",
            )]
        return []


class InvestorProfileRule(CrossFieldRule):
    """Institutional and family-office investors must look the part.

    They are expected to be accredited and to write checks at or above a
    configured minimum band.
    """

    FIELDS = frozenset({"investorType", "accreditationStatus", "checkSize"})

    def __init__(self, minimum_check_size: Optional[Mapping[str, str]] = None):
        if minimum_check_size is None:
            minimum_check_size = {t: "50k-250k" for t in PROFESSIONAL_INVESTOR_TYPES}
        self.minimum_check_size = dict(minimum_check_size)

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        investor_type = self._text(form, "investorType")
        if investor_type not in PROFESSIONAL_INVESTOR_TYPES:
            return []

        errors = []
        label = investor_type.replace("-", " ")

        status = self._text(form, "accreditationStatus")
        if status in ACCREDITATION_STATUSES and status != "yes":
            errors.append(self._error(
                ErrorCode.BUSINESS_LOGIC_MISMATCH, "accreditationStatus",
                f"{label.capitalize()} investors are typically accredited. Please verify your status.",
            ))

        minimum = self.minimum_check_size.get(investor_type)
        check_size = self._text(form, "checkSize")
        if minimum in CHECK_SIZES and check_size in CHECK_SIZES:
            if CHECK_SIZES.index(check_size) < CHECK_SIZES.index(minimum):
                errors.append(self._error(
                    ErrorCode.BUSINESS_LOGIC_MISMATCH, "checkSize",
                    f"Check size seems low for {label} investors. Please confirm the amount.",
                ))
        return errors


class CountryStateRule(CrossFieldRule):
    """US, Canadian and Australian residents must give their state or province."""

    FIELDS = frozenset({"country", "state"})

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        country = self._code(form, "country")
        region_label = REGION_REQUIRED_COUNTRIES.get(country)
        if region_label is None:
            return []

        state = self._code(form, "state")
        if not state:
            return [self._error(
                ErrorCode.REQUIRED, "state",
                f"{region_label} is required for {country} investors",
            )]
        if country == "US" and state not in US_STATES:
            return [self._error(ErrorCode.INVALID_STATE, "state", "Please select a valid US state")]
        return []


class JurisdictionRule(CrossFieldRule):
    """The stated 506(c) jurisdiction must lie inside the stated country."""

    FIELDS = frozenset({"mode", "country", "jurisdiction"})

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        if self._mode(form) != ACCREDITED_ONLY_MODE:
            return []
        jurisdiction = self._text(form, "jurisdiction")
        country = self._code(form, "country")
        if not jurisdiction or not country:
            return []

        parts = [part.strip().lower() for part in jurisdiction.split(",") if part.strip()]

        if country == "US":
            matched = any(
                part.upper() in US_STATES or part in US_STATES.values() or part in US_NATIONAL_NAMES
                for part in parts
            )
            return self._mismatch(matched, "a US state (e.g. California, CA) or United States")
        if country == "CA":
            return self._mismatch(
                _any_in(parts, CANADIAN_PROVINCES | {"canada"}), "a Canadian province or territory",
            )
        if country == "GB":
            return self._mismatch(
                bool(_UK_JURISDICTION_PATTERN.search(jurisdiction)), "England, Scotland, Wales or Northern Ireland",
            )
        if country == "AU":
            return self._mismatch(
                _any_in(parts, AUSTRALIAN_STATES | {"australia"}), "an Australian state or territory",
            )

        if len(jurisdiction) < 2:
            return [self._error(
                ErrorCode.JURISDICTION_INSUFFICIENT, "jurisdiction",
                "Please provide your jurisdiction of residence",
            )]
        return []

    def _mismatch(self, matched: bool, expected: str) -> list[ValidationError]:
        if matched:
            return []
        return [self._error(
            ErrorCode.JURISDICTION_MISMATCH, "jurisdiction",
            f"Jurisdiction should name {expected}",
        )]


class RestrictedCountryRule(CrossFieldRule):
    """Applications from sanctioned countries are refused outright."""

    FIELDS = frozenset({"country"})

    def __init__(self, restricted: Iterable[str] = ("CN", "RU", "IR", "KP")):
        self.restricted = frozenset(code.upper() for code in restricted)

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        if self._code(form, "country") in self.restricted:
            return [self._error(
                ErrorCode.RESTRICTED_JURISDICTION, "country",
                "Investment opportunities are not available in your jurisdiction",
            )]
        return []


def _any_in(parts: list[str], names: Iterable[str]) -> bool:
    return any(part in names for part in parts)


def cross_field_rules(settings: Optional[Settings] = None) -> list[BaseValidator]:
    """Investor cross-field rules, configured from settings."""
    settings = settings or get_settings()
    return [
        ModeRequirementsRule(),
        AccreditationRequirementRule(),
        InvestorProfileRule(settings.MINIMUM_CHECK_SIZE),
        CountryStateRule(),
        JurisdictionRule(),
        RestrictedCountryRule(settings.RESTRICTED_COUNTRIES),
    ]
