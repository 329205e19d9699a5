"""Tests for investor cross-field business rules."""

import pytest

from arena.validators.cross_field_rules import (
    AccreditationRequirementRule,
    CountryStateRule,
    InvestorProfileRule,
    JurisdictionRule,
    ModeRequirementsRule,
    RestrictedCountryRule,
)


def _codes(errors) -> list[str]:
    return [e.code for e in errors]


class TestModeRequirementsRule:
    """506(c) verification block."""

    rule = ModeRequirementsRule()

    def test_506b_needs_nothing_extra(self):
        assert self.rule.validate({"mode": "506b"}) == []

    def test_missing_mode_defaults_to_506b(self):
        assert self.rule.validate({}) == []

    def test_506c_requires_every_verification_field(self):
        errors = self.rule.validate({"mode": "506c"})
        assert {e.field for e in errors} == {
            "verificationMethod", "verificationFile", "entityName", "jurisdiction",
        }
        assert set(_codes(errors)) == {"REQUIRED"}

    def test_file_reference_satisfies_evidence(self, valid_506c_form):
        form = {**valid_506c_form, "verificationFile": None, "verificationFileRef": "uploads/abc.pdf"}
        assert self.rule.validate(form) == []

    def test_declares_its_fields(self):
        assert self.rule.references("verificationFileRef")
        assert not self.rule.references("email")


class TestAccreditationRequirementRule:
    """506(c) is for accredited investors only."""

    rule = AccreditationRequirementRule()

    @pytest.mark.parametrize("status", ["no", "unsure"])
    def test_506c_without_accreditation(self, status):
        errors = self.rule.validate({"mode": "506c", "accreditationStatus": status})
        assert _codes(errors) == ["ACCREDITATION_REQUIRED"]
        assert errors[0].field == "accreditationStatus"

    def test_506c_accredited_passes(self):
        assert self.rule.validate({"mode": "506c", "accreditationStatus": "yes"}) == []

    def test_506b_non_accredited_passes(self):
        assert self.rule.validate({"mode": "506b", "accreditationStatus": "no"}) == []

    def test_blank_status_is_left_to_the_field_rule(self):
        assert self.rule.validate({"mode": "506c", "accreditationStatus": ""}) == []


class TestInvestorProfileRule:
    """Institutional / family-office expectations."""

    rule = InvestorProfileRule()

    def test_institutional_small_check(self):
        errors = self.rule.validate({
            "investorType": "institutional", "accreditationStatus": "yes", "checkSize": "25k-50k",
        })
        assert _codes(errors) == ["BUSINESS_LOGIC_MISMATCH"]
        assert errors[0].field == "checkSize"

    def test_family_office_not_accredited(self):
        errors = self.rule.validate({
            "investorType": "family-office", "accreditationStatus": "no", "checkSize": "250k-plus",
        })
        assert _codes(errors) == ["BUSINESS_LOGIC_MISMATCH"]
        assert errors[0].field == "accreditationStatus"

    def test_both_mismatches_accumulate(self):
        errors = self.rule.validate({
            "investorType": "institutional", "accreditationStatus": "unsure", "checkSize": "25k-50k",
        })
        assert [e.field for e in errors] == ["accreditationStatus", "checkSize"]

    def test_individual_small_check_passes(self):
        assert self.rule.validate({
            "investorType": "individual", "accreditationStatus": "no", "checkSize": "25k-50k",
        }) == []

    def test_minimum_band_is_configurable(self):
        rule = InvestorProfileRule({"institutional": "250k-plus"})
        errors = rule.validate({
            "investorType": "institutional", "accreditationStatus": "yes", "checkSize": "50k-250k",
        })
        assert _codes(errors) == ["BUSINESS_LOGIC_MISMATCH"]
        assert rule.validate({
            "investorType": "family-office", "accreditationStatus": "yes", "checkSize": "25k-50k",
        }) == []


class TestCountryStateRule:
    """State / province coupling."""

    rule = CountryStateRule()

    @pytest.mark.parametrize("state", [None, "", "  "])
    def test_us_requires_state(self, state):
        errors = self.rule.validate({"country": "US", "state": state})
        assert _codes(errors) == ["REQUIRED"]
        assert errors[0].field == "state"

    def test_us_invalid_state(self):
        assert _codes(self.rule.validate({"country": "US", "state": "INVALID"})) == ["INVALID_STATE"]

    @pytest.mark.parametrize("state", ["CA", "ny", "DC"])
    def test_us_valid_state(self, state):
        assert self.rule.validate({"country": "US", "state": state}) == []

    @pytest.mark.parametrize("country", ["CA", "AU"])
    def test_canada_and_australia_require_region(self, country):
        assert _codes(self.rule.validate({"country": country})) == ["REQUIRED"]

    def test_canada_accepts_any_province_text(self):
        assert self.rule.validate({"country": "CA", "state": "Ontario"}) == []

    def test_other_countries_need_no_state(self):
        assert self.rule.validate({"country": "GB"}) == []


class TestJurisdictionRule:
    """506(c) jurisdiction consistency."""

    rule = JurisdictionRule()

    @pytest.mark.parametrize("country,jurisdiction", [
        ("US", "California"),
        ("US", "DE"),
        ("US", "Delaware, USA"),
        ("US", "United States"),
        ("CA", "Ontario"),
        ("GB", "Edinburgh, Scotland"),
        ("AU", "New South Wales"),
        ("DE", "Bavaria"),
    ])
    def test_consistent_jurisdictions(self, country, jurisdiction):
        form = {"mode": "506c", "country": country, "jurisdiction": jurisdiction}
        assert self.rule.validate(form) == []

    @pytest.mark.parametrize("country,jurisdiction", [
        ("US", "Ontario"),
        ("CA", "Texas"),
        ("GB", "Bavaria"),
        ("AU", "Scotland"),
    ])
    def test_mismatched_jurisdictions(self, country, jurisdiction):
        form = {"mode": "506c", "country": country, "jurisdiction": jurisdiction}
        assert _codes(self.rule.validate(form)) == ["JURISDICTION_MISMATCH"]

    def test_too_short_elsewhere(self):
        form = {"mode": "506c", "country": "SG", "jurisdiction": "S"}
        assert _codes(self.rule.validate(form)) == ["JURISDICTION_INSUFFICIENT"]

    def test_ignored_for_506b(self):
        assert self.rule.validate({"mode": "506b", "country": "US", "jurisdiction": "Ontario"}) == []


class TestRestrictedCountryRule:
    """Sanctioned jurisdictions."""

    @pytest.mark.parametrize("country", ["CN", "RU", "IR", "KP", "kp"])
    def test_restricted(self, country):
        errors = RestrictedCountryRule().validate({"country": country})
        assert _codes(errors) == ["RESTRICTED_JURISDICTION"]
        assert errors[0].field == "country"

    def test_allowed(self):
        assert RestrictedCountryRule().validate({"country": "US"}) == []

    def test_deny_list_is_configurable(self):
        rule = RestrictedCountryRule(["br"])
        assert _codes(rule.validate({"country": "BR"})) == ["RESTRICTED_JURISDICTION"]
        assert rule.validate({"country": "CN"}) == []
