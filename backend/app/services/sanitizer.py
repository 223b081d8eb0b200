"""Input sanitization and validation for user-submitted fields.

Two distinct transforms are provided and must not be conflated:

- sanitize_text() removes known script vectors from free text that is stored
  and later rendered as plain text. Ordinary punctuation (slashes, quotes,
  ampersands) survives unchanged.
- escape_for_display() neutralises every HTML metacharacter, for output
  that is interpolated into HTML.

URL-typed fields go through sanitize_url(), which rejects anything outside
the http/https/mailto allow-list instead of trying to repair it.
"""

import re
from collections.abc import Mapping
from typing import Any

DANGEROUS_TAGS = (
    "script",
    "iframe",
    "object",
    "embed",
    "form",
    "input",
    "link",
    "meta",
    "style",
    "base",
    "svg",
    "math",
    "details",
    "marquee",
)

# An unclosed dangerous tag runs to the end of the text
_DANGEROUS_TAG_RE = re.compile(
    r"<\s*/?\s*(?:" + "|".join(DANGEROUS_TAGS) + r")\b[^>]*(?:>|$)",
    re.IGNORECASE,
)
_EVENT_HANDLER_RE = re.compile(r"""\s+on\w+\s*=\s*["'][^"']*["']""", re.IGNORECASE)
_JAVASCRIPT_URI_RE = re.compile(r"javascript\s*:", re.IGNORECASE)
_DATA_HTML_URI_RE = re.compile(r"data\s*:\s*text/html", re.IGNORECASE)
_CSS_EXPRESSION_RE = re.compile(r"expression\s*\(", re.IGNORECASE)

_TEXT_PATTERNS = (
    _DANGEROUS_TAG_RE,
    _EVENT_HANDLER_RE,
    _JAVASCRIPT_URI_RE,
    _DATA_HTML_URI_RE,
    _CSS_EXPRESSION_RE,
)

_ALLOWED_URL_RE = re.compile(r"^(?:https?://|mailto:)", re.IGNORECASE)
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

_DISPLAY_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}
_DISPLAY_ESCAPE_TABLE = str.maketrans(_DISPLAY_ESCAPES)

MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128
MAX_NAME_LENGTH = 100


def _strip_patterns(value: str, patterns: tuple[re.Pattern[str], ...]) -> str:
    # Removing one construct can splice a new one together ("<scr<script>ipt>"),
    # so repeat until nothing matches.
    while True:
        cleaned = value
        for pattern in patterns:
            cleaned = pattern.sub("", cleaned)
        if cleaned == value:
            return cleaned
        value = cleaned


def sanitize_text(value: Any) -> str:
    """Remove dangerous tags, inline handlers and script URIs from free text.

    Returns "" for non-string input. Idempotent.
    """
    if not isinstance(value, str):
        return ""
    return _strip_patterns(value, _TEXT_PATTERNS).strip()


def escape_for_display(value: Any) -> str:
    """Replace & < > " ' / with HTML entities. Returns "" for non-string input."""
    if not isinstance(value, str):
        return ""
    return value.translate(_DISPLAY_ESCAPE_TABLE)


def sanitize_url(value: Any) -> str:
    """Return the trimmed URL if it uses http, https or mailto, else "".

    Accepted URLs still have embedded javascript:/data:text/html sequences
    removed.
    """
    if not isinstance(value, str):
        return ""
    trimmed = value.strip()
    if not _ALLOWED_URL_RE.match(trimmed):
        return ""
    return _strip_patterns(trimmed, (_JAVASCRIPT_URI_RE, _DATA_HTML_URI_RE))


def sanitize_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a mapping with sanitize_text() applied to every string value.

    Strings inside list values are sanitized too; other values pass through.
    """
    sanitized: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            sanitized[key] = sanitize_text(value)
        elif isinstance(value, list):
            sanitized[key] = [sanitize_text(item) if isinstance(item, str) else item for item in value]
        else:
            sanitized[key] = value
    return sanitized


def is_valid_email(email: Any) -> bool:
    return (
        isinstance(email, str)
        and len(email) <= MAX_EMAIL_LENGTH
        and _EMAIL_RE.fullmatch(email) is not None
    )


def is_valid_password(password: Any) -> bool:
    return isinstance(password, str) and MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH


def is_valid_name(name: Any) -> bool:
    return isinstance(name, str) and len(name.strip()) >= 1 and len(name) <= MAX_NAME_LENGTH
