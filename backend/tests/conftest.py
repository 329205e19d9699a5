"""Pytest fixtures for validation and API testing.

Provides reusable test fixtures for:
- Complete, valid founder and investor (506(b) and 506(c)) forms
- A FastAPI TestClient backed by an in-memory submission store

Usage:
    def test_valid_founder(valid_founder_form):
        assert validate_form_data(valid_founder_form).is_valid
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("USE_REDIS", "false")
os.environ.setdefault("LOG_LEVEL", "warning")

import pytest
from fastapi.testclient import TestClient

from arena.main import app
from arena.services.rate_limiter import TokenBucketRateLimiter
from arena.services.submission_store import InMemorySubmissionStore


@pytest.fixture
def valid_founder_form() -> dict:
    return {
        "fullName": "Jane Doe",
        "role": "CEO & Co-founder",
        "email": "jane@acme-robotics.com",
        "phone": "+1 415 555 0100",
        "linkedin": "https://www.linkedin.com/in/janedoe",
        "companyName": "Acme Robotics",
        "website": "https://acme-robotics.com",
        "stage": "seed",
        "industry": "enterprise-ai",
        "oneLineDescription": "AI copilots for warehouse operations teams",
        "problem": "Warehouse teams lose hours every shift reconciling inventory by hand.",
        "solution": "A vision model that counts stock continuously and flags discrepancies.",
        "traction": "paid-pilots",
        "revenue": "",
        "deckLink": "https://docsend.com/view/acme-seed",
        "videoPitch": "",
        "enterpriseEngagement": "paid-pilot",
        "keyHighlights": "Three Fortune 500 pilots converting to annual contracts.",
        "capitalRaised": "yes",
        "capitalRaisedAmount": "750000",
        "capitalSought": "1m-2m",
        "accuracyConfirm": True,
        "understandingConfirm": True,
        "signature": "Jane Doe",
    }


@pytest.fixture
def valid_investor_form() -> dict:
    """A complete 506(b) investor application."""
    return {
        "mode": "506b",
        "fullName": "John Smith",
        "email": "john.smith@example.com",
        "country": "US",
        "state": "CA",
        "investorType": "individual",
        "accreditationStatus": "yes",
        "checkSize": "50k-250k",
        "areasOfInterest": ["enterprise-ai", "fintech-ai"],
        "referralSource": "Conference",
        "consentConfirm": True,
        "signature": "John Smith",
    }


@pytest.fixture
def valid_506c_form(valid_investor_form) -> dict:
    """A complete 506(c) investor application with verification."""
    return {
        **valid_investor_form,
        "mode": "506c",
        "verificationMethod": "letter",
        "verificationFile": {
            "name": "accreditation-letter.pdf",
            "size": 204_800,
            "type": "application/pdf",
        },
        "entityName": "John Smith",
        "jurisdiction": "California",
        "custodianInfo": "",
    }


@pytest.fixture
def submission_store() -> InMemorySubmissionStore:
    return InMemorySubmissionStore(ttl_seconds=3600, max_entries=50)


@pytest.fixture
def rate_limiter() -> TokenBucketRateLimiter:
    return TokenBucketRateLimiter(max_tokens=5, refill_seconds=60, max_clients=100)


@pytest.fixture
def client(submission_store, rate_limiter):
    """TestClient wired to an in-memory store, with a fresh rate limit budget."""
    app.state.submission_store = submission_store
    app.state.rate_limiter = rate_limiter
    return TestClient(app)
