"""API tests for submission, live validation, options and health endpoints."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from arena.config import get_settings
from arena.main import app
from arena.services.rate_limiter import TokenBucketRateLimiter
from arena.services.submission_store import InMemorySubmissionStore, StoreUnavailableError


class UnavailableStore(InMemorySubmissionStore):
    """Store whose writes always fail."""

    async def save(self, record: dict) -> None:
        raise StoreUnavailableError("redis down")


class TestSubmitFounder:
    """POST /api/v1/applications/founder."""

    def test_valid_application_is_stored(self, client, valid_founder_form, submission_store):
        response = client.post("/api/v1/applications/founder", json=valid_founder_form)
        assert response.status_code == 201
        body = response.json()
        assert body["applicationType"] == "founder"
        assert body["status"] == "received"
        assert body["id"].startswith("fnd_")

        stored = client.get(f"/api/v1/applications/{body['id']}")
        assert stored.status_code == 200
        record = stored.json()
        assert record["data"]["companyName"] == "Acme Robotics"
        assert "clientIp" not in record
        assert "userAgent" not in record

        internal = asyncio.run(submission_store.get(body["id"]))
        assert internal["clientIp"] == "testclient"
        assert internal["userAgent"] == "testclient"

    def test_invalid_application_returns_errors(self, client, valid_founder_form):
        form = {**valid_founder_form, "email": "invalid-email"}
        response = client.post("/api/v1/applications/founder", json=form)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["validationErrors"] == [
            {"field": "email", "message": "Please enter a valid email address", "code": "INVALID_FORMAT"},
        ]

    def test_honeypot_is_rejected(self, client, valid_founder_form, submission_store):
        form = {**valid_founder_form, "websiteHoneypot": "http://spam.example"}
        response = client.post("/api/v1/applications/founder", json=form)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "Invalid submission"
        assert len(submission_store) == 0

    def test_honeypot_is_not_stored(self, client, valid_founder_form):
        form = {**valid_founder_form, "websiteHoneypot": ""}
        response = client.post("/api/v1/applications/founder", json=form)
        record = client.get(f"/api/v1/applications/{response.json()['id']}").json()
        assert "websiteHoneypot" not in record["data"]

    def test_non_object_body(self, client):
        response = client.post("/api/v1/applications/founder", json=["fullName", "Jane"])
        assert response.status_code == 400

    def test_invalid_json(self, client):
        response = client.post(
            "/api/v1/applications/founder",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400

    def test_rate_limited(self, client, rate_limiter):
        for _ in range(rate_limiter.max_tokens):
            assert client.post("/api/v1/applications/founder", json={}).status_code == 400
        response = client.post("/api/v1/applications/founder", json={})
        assert response.status_code == 429
        detail = response.json()["detail"]
        assert detail["error"] == "rate_limit_exceeded"
        assert detail["retry_after_seconds"] >= 1
        assert "retry-after" in response.headers
        assert response.headers["x-ratelimit-remaining"] == "0"

    def test_remaining_budget_header(self, client, rate_limiter, valid_founder_form):
        accepted = client.post("/api/v1/applications/founder", json=valid_founder_form)
        assert accepted.headers["x-ratelimit-remaining"] == str(rate_limiter.max_tokens - 1)
        rejected = client.post("/api/v1/applications/founder", json={})
        assert rejected.headers["x-ratelimit-remaining"] == str(rate_limiter.max_tokens - 2)

    def test_forwarded_for_from_untrusted_peer_is_ignored(self, client, rate_limiter):
        for n in range(rate_limiter.max_tokens):
            headers = {"X-Forwarded-For": f"203.0.113.{n}"}
            client.post("/api/v1/applications/founder", json={}, headers=headers)
        response = client.post(
            "/api/v1/applications/founder",
            json={},
            headers={"X-Forwarded-For": "198.51.100.7"},
        )
        assert response.status_code == 429

    def test_forwarded_for_from_trusted_proxy_is_used(
        self, client, valid_founder_form, submission_store, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "TRUSTED_PROXIES", ["testclient", "10.0.0.2"])
        response = client.post(
            "/api/v1/applications/founder",
            json=valid_founder_form,
            headers={"X-Forwarded-For": "1.1.1.1, 203.0.113.9, 10.0.0.2"},
        )
        assert response.status_code == 201
        record = asyncio.run(submission_store.get(response.json()["id"]))
        assert record["clientIp"] == "203.0.113.9"

    def test_store_failure_is_503(self, client, valid_founder_form):
        client.app.state.submission_store = UnavailableStore()
        response = client.post("/api/v1/applications/founder", json=valid_founder_form)
        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "storage_unavailable"


class TestSubmitInvestor:
    """POST /api/v1/applications/investor."""

    def test_valid_506c_application(self, client, valid_506c_form):
        response = client.post("/api/v1/applications/investor", json=valid_506c_form)
        assert response.status_code == 201
        submission_id = response.json()["id"]
        assert submission_id.startswith("inv_")

        record = client.get(f"/api/v1/applications/{submission_id}").json()
        assert record["applicationType"] == "investor"
        assert record["data"]["verificationFile"] == {
            "name": "accreditation-letter.pdf",
            "size": 204_800,
            "type": "application/pdf",
        }

    def test_file_reference_is_reduced_to_metadata(self, client, valid_506c_form):
        form = {
            **valid_506c_form,
            "verificationFile": {**valid_506c_form["verificationFile"], "lastModified": 1700000000},
        }
        submission_id = client.post("/api/v1/applications/investor", json=form).json()["id"]
        record = client.get(f"/api/v1/applications/{submission_id}").json()
        assert set(record["data"]["verificationFile"]) == {"name", "size", "type"}

    def test_business_rule_failure(self, client, valid_506c_form):
        form = {**valid_506c_form, "accreditationStatus": "no"}
        response = client.post("/api/v1/applications/investor", json=form)
        assert response.status_code == 400
        codes = [e["code"] for e in response.json()["validationErrors"]]
        assert codes == ["ACCREDITATION_REQUIRED"]

    def test_wrong_types_are_validation_errors(self, client, valid_investor_form):
        form = {**valid_investor_form, "areasOfInterest": 7, "consentConfirm": "yes"}
        response = client.post("/api/v1/applications/investor", json=form)
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["validationErrors"]}
        assert fields == {"areasOfInterest", "consentConfirm"}


class TestUncleanInputOnSubmit:
    """Values that would only pass after cleaning are rejected at submission."""

    OVERLONG_EMAIL = "a" * 64 + "@" + ("b" * 63 + ".") * 3 + "com"

    @pytest.mark.parametrize("path,form_fixture", [
        ("/api/v1/applications/founder", "valid_founder_form"),
        ("/api/v1/applications/investor", "valid_investor_form"),
    ])
    @pytest.mark.parametrize("field,value", [
        ("email", OVERLONG_EMAIL),
        ("email", "john\u200b@example.com"),
        ("email", "john@example.com\x00"),
        ("fullName", "John\x07 Smith"),
        ("fullName", "John\u200d Smith"),
    ])
    def test_rejected_and_not_stored(
        self, client, request, submission_store, path, form_fixture, field, value
    ):
        form = {**request.getfixturevalue(form_fixture), field: value}
        response = client.post(path, json=form)
        assert response.status_code == 400
        errors = response.json()["validationErrors"]
        assert [(e["field"], e["code"]) for e in errors] == [(field, "INVALID_FORMAT")]
        assert len(submission_store) == 0


class TestFieldValidationEndpoint:
    """POST /api/v1/applications/investor/validate-field."""

    def test_invalid_state(self, client):
        response = client.post(
            "/api/v1/applications/investor/validate-field",
            json={"field": "state", "value": "INVALID", "form": {"country": "US"}},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["isValid"] is False
        assert [e["code"] for e in body["errors"]] == ["INVALID_STATE"]

    def test_valid_field(self, client, valid_investor_form):
        response = client.post(
            "/api/v1/applications/investor/validate-field",
            json={"field": "email", "value": "new@example.com", "form": valid_investor_form},
        )
        assert response.json() == {"errors": [], "isValid": True}

    def test_missing_field_name_is_rejected(self, client):
        response = client.post("/api/v1/applications/investor/validate-field", json={"value": "x"})
        assert response.status_code == 422

    def test_form_may_be_null(self, client):
        response = client.post(
            "/api/v1/applications/investor/validate-field",
            json={"field": "email", "value": "a@example.com", "form": None},
        )
        assert response.status_code == 200
        assert response.json() == {"errors": [], "isValid": True}

    def test_does_not_consume_rate_limit(self, client, rate_limiter):
        for _ in range(rate_limiter.max_tokens + 2):
            response = client.post(
                "/api/v1/applications/investor/validate-field",
                json={"field": "email", "value": "a@example.com"},
            )
            assert response.status_code == 200


class TestStandaloneValidation:
    """POST /api/v1/validate/email and /api/v1/validate/name."""

    def test_email(self, client):
        assert client.post("/api/v1/validate/email", json={"email": "user@example.com"}).json()["isValid"]
        body = client.post("/api/v1/validate/email", json={"email": "invalid-email"}).json()
        assert body["isValid"] is False

    def test_name(self, client):
        assert client.post("/api/v1/validate/name", json={"name": "José García"}).json()["isValid"]
        body = client.post("/api/v1/validate/name", json={"name": "John<script>"}).json()
        assert body["isValid"] is False


class TestReadEndpoints:
    """Options, lookup, health and root."""

    def test_options(self, client):
        body = client.get("/api/v1/applications/options").json()
        assert [m["value"] for m in body["modes"]] == ["506b", "506c"]
        assert [c["value"] for c in body["checkSizes"]] == ["25k-50k", "50k-250k", "250k-plus"]
        assert "US" in body["countries"]
        assert "DC" in body["usStates"]

    def test_unknown_application(self, client):
        assert client.get("/api/v1/applications/inv_doesnotexist").status_code == 404

    def test_health_with_memory_store(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "degraded"
        assert body["dependencies"]["submission_store"]["status"] == "degraded"

    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "Arena Fund Intake"
        assert body["health"] == "/api/v1/health"


class TestLifespan:
    """Startup wiring."""

    def test_startup_builds_store_and_rate_limiter(self):
        with TestClient(app) as started:
            assert isinstance(app.state.submission_store, InMemorySubmissionStore)
            assert isinstance(app.state.rate_limiter, TokenBucketRateLimiter)
            assert started.get("/api/v1/health").status_code == 200
