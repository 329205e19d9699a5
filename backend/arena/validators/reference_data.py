"""Reference data — closed option sets, jurisdictions, and content patterns.

This is the encoded product and compliance knowledge that makes validation
deterministic. Option values match what the website forms submit.
"""

import re

# ──────────────────────────────────────────────────────────────────────
# INVESTOR FORM OPTIONS
# ──────────────────────────────────────────────────────────────────────

INVESTOR_MODES: tuple[str, ...] = ("506b", "506c")

INVESTOR_TYPES: tuple[str, ...] = ("individual", "family-office", "institutional", "other")

ACCREDITATION_STATUSES: tuple[str, ...] = ("yes", "no", "unsure")

# Ordered smallest to largest; position is the band's rank.
CHECK_SIZES: tuple[str, ...] = ("25k-50k", "50k-250k", "250k-plus")

VERIFICATION_METHODS: tuple[str, ...] = ("letter", "third-party", "bank-brokerage")

AREAS_OF_INTEREST: tuple[str, ...] = ("enterprise-ai", "healthcare-ai", "fintech-ai", "hi-tech")

SUPPORTED_COUNTRIES: tuple[str, ...] = (
    "US", "CA", "GB", "AU", "DE", "FR", "NL", "CH", "SG", "HK", "JP", "KR", "IL",
)

# Countries whose residents must enter a state / province
REGION_REQUIRED_COUNTRIES: dict[str, str] = {
    "US": "State",
    "CA": "Province",
    "AU": "State/territory",
}


# ──────────────────────────────────────────────────────────────────────
# JURISDICTIONS
# ──────────────────────────────────────────────────────────────────────

US_STATES: dict[str, str] = {
    "AL": "alabama", "AK": "alaska", "AZ": "arizona", "AR": "arkansas",
    "CA": "california", "CO": "colorado", "CT": "connecticut", "DE": "delaware",
    "FL": "florida", "GA": "georgia", "HI": "hawaii", "ID": "idaho",
    "IL": "illinois", "IN": "indiana", "IA": "iowa", "KS": "kansas",
    "KY": "kentucky", "LA": "louisiana", "ME": "maine", "MD": "maryland",
    "MA": "massachusetts", "MI": "michigan", "MN": "minnesota", "MS": "mississippi",
    "MO": "missouri", "MT": "montana", "NE": "nebraska", "NV": "nevada",
    "NH": "new hampshire", "NJ": "new jersey", "NM": "new mexico", "NY": "new york",
    "NC": "north carolina", "ND": "north dakota", "OH": "ohio", "OK": "oklahoma",
    "OR": "oregon", "PA": "pennsylvania", "RI": "rhode island", "SC": "south carolina",
    "SD": "south dakota", "TN": "tennessee", "TX": "texas", "UT": "utah",
    "VT": "vermont", "VA": "virginia", "WA": "washington", "WV": "west virginia",
    "WI": "wisconsin", "WY": "wyoming", "DC": "district of columbia",
}

US_NATIONAL_NAMES: frozenset[str] = frozenset({
    "us", "usa", "u.s.", "u.s.a.", "united states", "united states of america",
})

CANADIAN_PROVINCES: frozenset[str] = frozenset({
    "alberta", "british columbia", "manitoba", "new brunswick", "newfoundland and labrador",
    "northwest territories", "nova scotia", "nunavut", "ontario", "prince edward island",
    "quebec", "saskatchewan", "yukon",
})

UK_JURISDICTIONS: tuple[str, ...] = (
    "england", "scotland", "wales", "northern ireland", "united kingdom", "uk",
)

AUSTRALIAN_STATES: frozenset[str] = frozenset({
    "new south wales", "victoria", "queensland", "western australia", "south australia",
    "tasmania", "northern territory", "australian capital territory",
})


# ──────────────────────────────────────────────────────────────────────
# FILE CONSTRAINTS
# ──────────────────────────────────────────────────────────────────────

DECK_MAX_FILE_SIZE = 25 * 1024 * 1024
DECK_ALLOWED_TYPES: frozenset[str] = frozenset({"application/pdf", "image/jpeg", "image/png"})
DECK_ALLOWED_EXTENSIONS: frozenset[str] = frozenset({".pdf", ".jpg", ".jpeg", ".png"})

VERIFICATION_MAX_FILE_SIZE = 10 * 1024 * 1024
VERIFICATION_ALLOWED_TYPES: frozenset[str] = frozenset({"application/pdf"})
VERIFICATION_ALLOWED_EXTENSIONS: frozenset[str] = frozenset({".pdf"})

MAX_FILENAME_LENGTH = 255

SUSPICIOUS_FILENAME_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\.(exe|bat|cmd|com|pif|scr|vbs|js|jar|app|deb|pkg|dmg)$", re.I),
    re.compile(r"\.(php|asp|jsp|cgi|pl|py|rb|sh)$", re.I),
    re.compile(r"<script", re.I),
    re.compile(r"javascript:", re.I),
    re.compile(r"\.\."),
    re.compile(r'[<>:"|?*\x00]'),
    re.compile(r"^(con|prn|aux|nul|com[1-9]|lpt[1-9])(\.|$)", re.I),
)


# ──────────────────────────────────────────────────────────────────────
# TEXT CONTENT PATTERNS
# ──────────────────────────────────────────────────────────────────────

MAX_TEXT_LENGTH = 10_000

# Markup, script protocols, NoSQL operators and SQL statements
SUSPICIOUS_CONTENT_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"<script\b", re.I),
    re.compile(r"javascript:", re.I),
    re.compile(r"vbscript:", re.I),
    re.compile(r"\bon\w+\s*=", re.I),
    re.compile(r"data:text/html", re.I),
    re.compile(r"<(iframe|object|embed|form)\b", re.I),
    re.compile(r"expression\s*\(", re.I),
    re.compile(r"@import", re.I),
    re.compile(r"\$(where|ne|gt|lt|regex)\b", re.I),
    re.compile(r"\bunion\s+select\b", re.I),
    re.compile(r"\binsert\s+into\b", re.I),
    re.compile(r"\bupdate\s+\w+\s+set\b", re.I),
    re.compile(r"\bdelete\s+from\b", re.I),
    re.compile(r"\bdrop\s+table\b", re.I),
)

# Spam heuristic: more than this many words with a unique-word ratio below the floor
REPETITION_MIN_WORDS = 10
REPETITION_UNIQUE_RATIO = 0.3

DISPOSABLE_EMAIL_DOMAINS: frozenset[str] = frozenset({
    "10minutemail.com", "tempmail.org", "guerrillamail.com", "mailinator.com",
    "throwaway.email", "temp-mail.org", "getnada.com", "maildrop.cc",
})
