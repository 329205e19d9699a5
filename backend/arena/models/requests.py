"""API request models.

Application bodies are free-form JSON objects: wrongly-typed values must come
back as validation errors, so only the small helper endpoints use models.
"""

from typing import Any

from pydantic import BaseModel, Field


class FieldValidationRequest(BaseModel):
    """Live validation of one investor form field."""

    field: str = Field(..., min_length=1, max_length=100, examples=["state"])
    value: Any = None
    form: Any = Field(
        default=None,
        description="The rest of the form as currently filled in; anything but an object counts as empty",
        examples=[{"country": "US", "mode": "506b"}],
    )


class EmailValidationRequest(BaseModel):
    email: Any = Field(default=None, examples=["jane@example.com"])


class NameValidationRequest(BaseModel):
    name: Any = Field(default=None, examples=["José García"])
