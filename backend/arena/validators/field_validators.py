"""Field validators — checks that look at one field in isolation.

Standalone checks (``validate_email``, ``validate_name``, ``is_valid_url``,
``check_file``, ``check_text_content``) are plain functions. ``FieldValidator``
binds one of them to a form field so the engine can run it like any other
validator. Builders at the bottom of the module produce the common field shapes
(required text, closed-set choice, confirmation checkbox, ...).
"""

import re
from typing import Any, Callable, Iterable, Mapping, Optional
from urllib.parse import urlparse

from arena.validators.base import BaseValidator, is_blank, text_value
from arena.validators.models import ErrorCode, ValidationError, ValidationResult
from arena.validators.reference_data import (
    DISPOSABLE_EMAIL_DOMAINS,
    MAX_FILENAME_LENGTH,
    MAX_TEXT_LENGTH,
    REPETITION_MIN_WORDS,
    REPETITION_UNIQUE_RATIO,
    SUSPICIOUS_CONTENT_PATTERNS,
    SUSPICIOUS_FILENAME_PATTERNS,
)

# (value, full form snapshot) -> findings
FieldCheck = Callable[[Any, Mapping[str, Any]], list[ValidationError]]

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_ZERO_WIDTH_CHARS = re.compile(r"[\u200b-\u200d\ufeff]")

EMAIL_REGEX = re.compile(
    r"[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*"
)
_IP_DOMAIN = re.compile(r"\d{1,3}(\.\d{1,3}){3}")
EMAIL_MAX_LENGTH = 254

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
# Latin letters including accented ranges (Latin-1, Extended-A/B, Additional)
_VALID_NAME = re.compile(r"[A-Za-z\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u00ff\u0100-\u024f\u1e00-\u1eff\s\-'.]+")
_NAME_FORBIDDEN_CHARS = re.compile(r"[0-9@#$%^&*()_+={}\[\]|\\:\";?/<>~`]")
_REPEATED_CHARS = re.compile(r"(.)\1{4,}")
_NAME_SQL_PATTERNS = (
    re.compile(r";|--"),
    re.compile(r"\b(union|select|insert|delete|update|drop|create|alter|exec|execute)\b\s+", re.I),
    re.compile(r"\b(script|javascript|vbscript|onload|onerror|onclick)\b", re.I),
)


def _error(code: ErrorCode, field: str, message: str) -> ValidationError:
    return ValidationError(field=field, message=message, code=code)


# ── Text ──


def has_hidden_characters(value: str) -> bool:
    """Control or zero-width characters anywhere in the raw value."""
    return bool(_CONTROL_CHARS.search(value) or _ZERO_WIDTH_CHARS.search(value))


def contains_suspicious_content(text: str) -> bool:
    """Markup, script protocols, or injection-shaped fragments."""
    return any(pattern.search(text) for pattern in SUSPICIOUS_CONTENT_PATTERNS)


def is_repetitive(text: str) -> bool:
    """Spam heuristic: many words, few of them distinct."""
    words = text.lower().split()
    if len(words) <= REPETITION_MIN_WORDS:
        return False
    return len(set(words)) / len(words) < REPETITION_UNIQUE_RATIO


def check_text_content(text: str, field: str) -> list[ValidationError]:
    """Security and quality scan for free-text fields."""
    errors = []
    if contains_suspicious_content(text):
        errors.append(_error(
            ErrorCode.SUSPICIOUS_CONTENT, field,
            "Content contains invalid characters or patterns",
        ))
    if is_repetitive(text):
        errors.append(_error(
            ErrorCode.REPETITIVE_CONTENT, field,
            "Content appears to be repetitive or spam-like",
        ))
    return errors


# ── Email ──


def email_problem(email: str) -> Optional[tuple[ErrorCode, str]]:
    """Return (code, message) describing why an address is unacceptable, or None."""
    if has_hidden_characters(email):
        return ErrorCode.INVALID_FORMAT, "Email contains invalid characters"

    address = email.strip()
    if len(address) > EMAIL_MAX_LENGTH:
        return ErrorCode.INVALID_FORMAT, f"Email must be {EMAIL_MAX_LENGTH} characters or less"

    if "<" in address or ">" in address or contains_suspicious_content(address):
        return ErrorCode.INVALID_FORMAT, "Email contains invalid characters"

    if not EMAIL_REGEX.fullmatch(address):
        return ErrorCode.INVALID_FORMAT, "Please enter a valid email address"

    local, domain = address.lower().rsplit("@", 1)
    if len(local) > 64:
        return ErrorCode.INVALID_FORMAT, "Email local part is too long"
    if len(domain) > 253:
        return ErrorCode.INVALID_FORMAT, "Email domain is too long"
    if ".." in address:
        return ErrorCode.INVALID_FORMAT, "Email cannot contain consecutive dots"
    if local.startswith(".") or local.endswith("."):
        return ErrorCode.INVALID_FORMAT, "Email local part cannot start or end with a dot"
    if "." not in domain or _IP_DOMAIN.fullmatch(domain):
        return ErrorCode.INVALID_FORMAT, "Invalid domain format"

    tld = domain.rsplit(".", 1)[1]
    if not tld.isalpha() or not 2 <= len(tld) <= 63:
        return ErrorCode.INVALID_FORMAT, "Invalid top-level domain"

    if domain in DISPOSABLE_EMAIL_DOMAINS:
        return ErrorCode.DISPOSABLE_EMAIL, "Disposable email addresses are not allowed"

    return None


def check_email(value: Any, field: str = "email") -> list[ValidationError]:
    if is_blank(value):
        return [_error(ErrorCode.REQUIRED, field, "Email address is required")]
    if not isinstance(value, str):
        return [_error(ErrorCode.INVALID_FORMAT, field, "Please enter a valid email address")]

    problem = email_problem(value)
    if problem is None:
        return []
    code, message = problem
    return [_error(code, field, message)]


def validate_email(email: Any, field: str = "email") -> ValidationResult:
    """Syntactic email check: ``local@domain``, no consecutive dots, sane lengths."""
    return ValidationResult.build(check_email(email, field))


# ── Names ──


def name_problem(name: str) -> Optional[tuple[ErrorCode, str]]:
    """Return (code, message) describing why a personal name is unacceptable, or None."""
    if has_hidden_characters(name):
        return ErrorCode.INVALID_FORMAT, "Name contains invalid characters"

    cleaned = name.strip()
    if len(cleaned) < NAME_MIN_LENGTH:
        return ErrorCode.INVALID_LENGTH, "Please enter your full name"
    if len(cleaned) > NAME_MAX_LENGTH:
        return ErrorCode.INVALID_LENGTH, f"Name must be {NAME_MAX_LENGTH} characters or less"
    if _NAME_FORBIDDEN_CHARS.search(cleaned) or not _VALID_NAME.fullmatch(cleaned):
        return ErrorCode.INVALID_FORMAT, "Name contains invalid characters"
    if _REPEATED_CHARS.search(cleaned):
        return ErrorCode.INVALID_FORMAT, "Name contains suspicious patterns"
    if any(pattern.search(cleaned) for pattern in _NAME_SQL_PATTERNS):
        return ErrorCode.INVALID_FORMAT, "Name contains invalid characters"
    return None


def check_name(value: Any, field: str = "fullName") -> list[ValidationError]:
    if is_blank(value):
        return [_error(ErrorCode.REQUIRED, field, "Your full name is required")]
    if not isinstance(value, str):
        return [_error(ErrorCode.INVALID_FORMAT, field, "Name contains invalid characters")]

    problem = name_problem(value)
    if problem is None:
        return []
    code, message = problem
    return [_error(code, field, message)]


def validate_name(name: Any, field: str = "fullName") -> ValidationResult:
    """Personal name check: 2-100 letters (accents allowed), spaces, hyphens, apostrophes."""
    return ValidationResult.build(check_name(name, field))


# ── URLs ──


def is_valid_url(url: str) -> bool:
    """http(s) URL with a hostname, no whitespace, at most 2048 characters."""
    candidate = url.strip()
    if not candidate or len(candidate) > 2048 or any(ch.isspace() for ch in candidate):
        return False
    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(hostname) and len(hostname) <= 253


# ── File references ──


def check_file(
    value: Any,
    field: str,
    max_size: int,
    allowed_types: Iterable[str],
    allowed_extensions: Iterable[str],
    min_size: int = 1,
    type_label: str = "PDF",
) -> list[ValidationError]:
    """Validate uploaded-file metadata ``{name, size, type}``."""
    if not isinstance(value, Mapping):
        return [_error(ErrorCode.INVALID_FORMAT, field, "File reference is malformed")]

    name = value.get("name")
    size = value.get("size")
    content_type = value.get("type")
    if not isinstance(name, str) or not name or isinstance(size, bool) or not isinstance(size, int):
        return [_error(ErrorCode.INVALID_FORMAT, field, "File reference is malformed")]

    errors = []

    if size > max_size:
        errors.append(_error(
            ErrorCode.FILE_TOO_LARGE, field,
            f"File must be less than {max_size // (1024 * 1024)}MB",
        ))
    if size == 0:
        errors.append(_error(ErrorCode.EMPTY_FILE, field, "File is empty"))
    elif size < min_size:
        errors.append(_error(ErrorCode.FILE_TOO_SMALL, field, "File appears to be corrupted"))

    if content_type not in set(allowed_types):
        errors.append(_error(
            ErrorCode.INVALID_FILE_TYPE, field,
            f"Only {type_label} files are allowed",
        ))

    extension = name[name.rfind("."):].lower() if "." in name else ""
    if extension not in set(allowed_extensions):
        errors.append(_error(ErrorCode.INVALID_FILE_EXTENSION, field, "File extension not allowed"))

    if any(pattern.search(name) for pattern in SUSPICIOUS_FILENAME_PATTERNS):
        errors.append(_error(
            ErrorCode.SUSPICIOUS_FILENAME, field,
            "File name contains invalid characters or patterns",
        ))
    if len(name) > MAX_FILENAME_LENGTH:
        errors.append(_error(
            ErrorCode.FILENAME_TOO_LONG, field,
            f"File name is too long (maximum {MAX_FILENAME_LENGTH} characters)",
        ))
    if name.startswith((".", "~")):
        errors.append(_error(ErrorCode.HIDDEN_FILE, field, "Hidden or system files are not allowed"))

    return errors


# ── Field validator ──


class FieldValidator(BaseValidator):
    """Runs one check against one field of the form."""

    def __init__(self, field: str, check: FieldCheck, depends_on: Iterable[str] = ()):
        self.field = field
        self._check = check
        self._fields = frozenset({field, *depends_on})

    @property
    def name(self) -> str:
        return f"FieldValidator[{self.field}]"

    @property
    def fields(self) -> frozenset[str]:
        return self._fields

    def validate(self, form: Mapping[str, Any]) -> list[ValidationError]:
        return self._check(form.get(self.field), form)


# ── Check builders ──


def required_text(
    field: str,
    required_message: str,
    max_length: Optional[int] = None,
    min_length: Optional[int] = None,
    min_length_message: str = "",
    scan: bool = True,
) -> FieldCheck:
    """Non-blank string, optional length bounds, optional content scan."""

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        text = text_value(value)
        if not text:
            return [_error(ErrorCode.REQUIRED, field, required_message)]
        if min_length is not None and len(text) < min_length:
            return [_error(ErrorCode.INVALID_LENGTH, field, min_length_message)]
        if max_length is not None and len(text) > max_length:
            return [_error(
                ErrorCode.MAX_LENGTH, field,
                f"Must be {max_length} characters or less",
            )]
        return check_text_content(text, field) if scan else []

    return check


def optional_text(field: str, max_length: int = MAX_TEXT_LENGTH) -> FieldCheck:
    """Free text that may be omitted; scanned when present."""

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if is_blank(value):
            return []
        if not isinstance(value, str):
            return [_error(ErrorCode.INVALID_FORMAT, field, "Must be text")]
        text = value.strip()
        if len(text) > max_length:
            return [_error(ErrorCode.MAX_LENGTH, field, f"Must be {max_length} characters or less")]
        return check_text_content(text, field)

    return check


def required_choice(
    field: str,
    options: Iterable[str],
    required_message: str,
    invalid_code: ErrorCode,
    invalid_message: str,
    normalize: Callable[[str], str] = lambda v: v,
) -> FieldCheck:
    """Selection that must be present and belong to a closed set."""
    allowed = frozenset(options)

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if is_blank(value):
            return [_error(ErrorCode.REQUIRED, field, required_message)]
        if not isinstance(value, str) or normalize(value.strip()) not in allowed:
            return [_error(invalid_code, field, invalid_message)]
        return []

    return check


def optional_choice(
    field: str,
    options: Iterable[str],
    invalid_code: ErrorCode,
    invalid_message: str,
) -> FieldCheck:
    """Selection that may be omitted but must belong to a closed set when given."""
    allowed = frozenset(options)

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if is_blank(value):
            return []
        if not isinstance(value, str) or value.strip() not in allowed:
            return [_error(invalid_code, field, invalid_message)]
        return []

    return check


def required_selection(field: str, required_message: str) -> FieldCheck:
    """Dropdown whose options are owned by the UI: only presence is checked."""

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if is_blank(value):
            return [_error(ErrorCode.REQUIRED, field, required_message)]
        if not isinstance(value, str):
            return [_error(ErrorCode.INVALID_FORMAT, field, "Please select a valid option")]
        return []

    return check


def url_field(field: str, invalid_message: str, required_message: Optional[str] = None) -> FieldCheck:
    """http(s) URL; required when ``required_message`` is given."""

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if is_blank(value):
            if required_message:
                return [_error(ErrorCode.REQUIRED, field, required_message)]
            return []
        if not isinstance(value, str) or not is_valid_url(value):
            return [_error(ErrorCode.INVALID_FORMAT, field, invalid_message)]
        return []

    return check


def must_confirm(field: str, message: str) -> FieldCheck:
    """Checkbox that must be ticked (literal ``True``)."""

    def check(value: Any, form: Mapping[str, Any]) -> list[ValidationError]:
        if value is not True:
            return [_error(ErrorCode.REQUIRED, field, message)]
        return []

    return check


def email_field(field: str = "email") -> FieldCheck:
    return lambda value, form: check_email(value, field)


def name_field(field: str = "fullName") -> FieldCheck:
    return lambda value, form: check_name(value, field)
