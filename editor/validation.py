"""
MODULE_DESCRIPTION: Shared Validation Schema Engine - Field Rules, Schemas and Sanitizers

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

This module is the single source of validation truth for the Wellness Sessions
application. The same schema objects are consulted by the session editor (the
form-state controller running in the client process) and by the FastAPI route
handlers, so a value rejected in the editor is rejected by the server with the
exact same message and vice versa.

Key Functionality:
    - Declarative field rules (required, length bounds, pattern, custom callable)
    - Whole-form validation producing a field -> message error map
    - Input sanitization (trim, whitespace collapsing, angle bracket stripping)
    - Tag list parsing from comma-separated text
    - Helpers for building server validation responses and comparing error maps

===================================================================================
RULE EVALUATION ORDER
===================================================================================

validate_field(value, rule, field_name, form_data):
    1. custom callable present -> its result is returned verbatim, nothing else runs
    2. required -> None, "" or whitespace-only fail with "<field> is required"
    3. empty, non-required values pass
    4. string values are trimmed, then checked against min_length, max_length and
       pattern in that order; the first failure wins

Messages:
    "<field> is required"
    "<field> must be at least N characters"
    "<field> must be less than N characters"
    "<field> format is invalid"

===================================================================================
SCHEMAS
===================================================================================

LOGIN_SCHEMA:     email, password
REGISTER_SCHEMA:  name, email, password, confirm_password
SESSION_SCHEMA:   title, tags, json_file_url, status

All rules are pure functions of (value, form_data). Running validate_form twice
on identical input returns identical results.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Union
from urllib.parse import urlparse

from api.utils.debug import print__validation_debug

# ==============================================================================
# CONSTANTS
# ==============================================================================

# RFC 5322 style address check
EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
URL_REGEX = re.compile(
    r"^https?://(?:[-\w.])+(?::[0-9]+)?(?:/(?:[\w/_.])*(?:\?(?:[\w&=%.])*)?(?:#(?:[\w.])*)?)?$"
)
# At least one lowercase, one uppercase and one digit
PASSWORD_STRENGTH_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).+$")

NAME_REGEX = re.compile(r"^[a-zA-Z\s'-]+$")
TITLE_REGEX = re.compile(r"^[a-zA-Z0-9\s\-_.,!?()]+$")
TAG_REGEX = re.compile(r"^[a-zA-Z0-9\s\-_]+$")

MAX_TAGS = 10
MAX_TAG_LENGTH = 30
MAX_URL_LENGTH = 2048
MAX_EMAIL_LENGTH = 254
SESSION_STATUSES = ("draft", "published")

_WHITESPACE_RUN = re.compile(r"\s+")
_ANGLE_BRACKETS = re.compile(r"[<>]")

CustomCheck = Callable[[Any, Optional[Mapping[str, Any]]], Optional[str]]


# ==============================================================================
# TYPES
# ==============================================================================


@dataclass(frozen=True)
class FieldRule:
    """Declarative rule for a single form field.

    When ``custom`` is set it fully replaces the built-in checks.
    """

    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Pattern] = None
    custom: Optional[CustomCheck] = None


ValidationSchema = Dict[str, FieldRule]


@dataclass
class ValidationResult:
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)

    def first_error(self) -> Optional[str]:
        return next(iter(self.errors.values()), None)


# ==============================================================================
# CORE VALIDATION
# ==============================================================================


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_field(
    value: Any,
    rule: FieldRule,
    field_name: str,
    form_data: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Validate one value against one rule.

    Args:
        value: The raw field value
        rule: FieldRule to apply
        field_name: Name used in generated messages
        form_data: Whole form, passed to custom checks that compare fields

    Returns:
        The error message, or None when the value passes
    """
    if rule.custom is not None:
        return rule.custom(value, form_data)

    if rule.required and _is_blank(value):
        return f"{field_name} is required"

    # Non-required empty values skip the remaining checks
    if _is_blank(value) or (not isinstance(value, str) and not value):
        return None

    if isinstance(value, str):
        trimmed = value.strip()
        if rule.min_length and len(trimmed) < rule.min_length:
            return f"{field_name} must be at least {rule.min_length} characters"
        if rule.max_length and len(trimmed) > rule.max_length:
            return f"{field_name} must be less than {rule.max_length} characters"
        if rule.pattern is not None and not rule.pattern.search(trimmed):
            return f"{field_name} format is invalid"

    return None


def validate_form(
    form_data: Mapping[str, Any], schema: ValidationSchema
) -> ValidationResult:
    """Run every schema rule against ``form_data`` in schema order."""
    errors: Dict[str, str] = {}
    for field_name, rule in schema.items():
        error = validate_field(form_data.get(field_name), rule, field_name, form_data)
        if error:
            errors[field_name] = error

    if errors:
        print__validation_debug(f"❌ Form invalid: {errors}")
    return ValidationResult(is_valid=not errors, errors=errors)


def validate_field_real_time(
    field_name: str,
    value: Any,
    schema: ValidationSchema,
    form_data: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Validate a single field by name; unknown fields always pass."""
    rule = schema.get(field_name)
    if rule is None:
        return None
    return validate_field(value, rule, field_name, form_data)


# ==============================================================================
# SANITIZATION
# ==============================================================================


def sanitize_input(value: Any) -> str:
    """Trim, collapse whitespace runs and drop ``<``/``>`` characters.

    Non-string input sanitizes to an empty string.
    """
    if not isinstance(value, str):
        return ""
    collapsed = _WHITESPACE_RUN.sub(" ", value.strip())
    # Removing a bracket can leave a leading/trailing space behind ("< a")
    return _WHITESPACE_RUN.sub(" ", _ANGLE_BRACKETS.sub("", collapsed)).strip()


def sanitize_value(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_input(value)
    if isinstance(value, list):
        return [sanitize_input(item) if isinstance(item, str) else item for item in value]
    return value


def sanitize_form_data(form_data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a sanitized copy of the form; applying it twice changes nothing."""
    return {key: sanitize_value(value) for key, value in form_data.items()}


def parse_tags(raw: Union[str, List[Any], None]) -> List[str]:
    """Turn comma-separated text (or a list) into a clean tag list.

    Entries are trimmed, empty ones dropped and at most MAX_TAGS kept.
    Duplicates are preserved.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        parts = raw.split(",")
    else:
        parts = [item for item in raw if isinstance(item, str)]
    tags = [part.strip() for part in parts]
    return [tag for tag in tags if tag][:MAX_TAGS]


# ==============================================================================
# FIELD CHECKS
# ==============================================================================


def _check_login_email(value: Any, _form_data=None) -> Optional[str]:
    email = _text(value).strip()
    if not email:
        return "Email is required"
    if not EMAIL_REGEX.match(email):
        return "Please enter a valid email address"
    return None


def _check_login_password(value: Any, _form_data=None) -> Optional[str]:
    password = _text(value)
    if not password:
        return "Password is required"
    if len(password) < 6:
        return "Password must be at least 6 characters"
    return None


def _check_name(value: Any, _form_data=None) -> Optional[str]:
    name = _text(value).strip()
    if not name:
        return "Name is required"
    if len(name) < 2:
        return "Name must be at least 2 characters"
    if len(name) > 50:
        return "Name must be less than 50 characters"
    if not NAME_REGEX.match(name):
        return "Name can only contain letters, spaces, hyphens, and apostrophes"
    return None


def _check_register_email(value: Any, form_data=None) -> Optional[str]:
    error = _check_login_email(value, form_data)
    if error:
        return error
    if len(_text(value).strip()) > MAX_EMAIL_LENGTH:
        return "Email address is too long"
    return None


def _check_register_password(value: Any, _form_data=None) -> Optional[str]:
    password = _text(value)
    if not password:
        return "Password is required"
    if len(password) < 6:
        return "Password must be at least 6 characters"
    if len(password) > 128:
        return "Password is too long"
    if not PASSWORD_STRENGTH_REGEX.match(password):
        return (
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    return None


def _check_confirm_password(value: Any, form_data=None) -> Optional[str]:
    confirm = _text(value)
    if not confirm:
        return "Please confirm your password"
    if form_data is not None and confirm != form_data.get("password"):
        return "Passwords do not match"
    return None


def _check_title(value: Any, _form_data=None) -> Optional[str]:
    title = _text(value).strip()
    if not title:
        return "Title is required"
    if len(title) < 3:
        return "Title must be at least 3 characters long"
    if len(title) > 100:
        return "Title must be less than 100 characters"
    if not TITLE_REGEX.match(title):
        return "Title contains invalid characters"
    return None


def _check_tags(value: Any, _form_data=None) -> Optional[str]:
    tags = value if isinstance(value, list) else []
    if len(tags) > MAX_TAGS:
        return f"Maximum {MAX_TAGS} tags allowed"
    for tag in tags:
        if not isinstance(tag, str):
            return "Invalid tag format"
        tag = tag.strip()
        if not tag:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            return f"Each tag must be less than {MAX_TAG_LENGTH} characters"
        if not TAG_REGEX.match(tag):
            return "Tags can only contain letters, numbers, spaces, hyphens, and underscores"
    return None


def _check_json_file_url(value: Any, _form_data=None) -> Optional[str]:
    url = _text(value).strip()
    if not url:
        return None  # optional

    parsed = urlparse(url)
    if not parsed.scheme or any(ch.isspace() for ch in url):
        return "Please provide a valid URL"
    if parsed.scheme.lower() not in ("http", "https"):
        return "URL must start with http:// or https://"
    if not parsed.netloc:
        return "Please provide a valid URL"
    if len(url) > MAX_URL_LENGTH:
        return "URL is too long"
    return None


def _check_status(value: Any, _form_data=None) -> Optional[str]:
    if value is None or value == "":
        return None
    if value not in SESSION_STATUSES:
        return "Status must be either draft or published"
    return None


# ==============================================================================
# SCHEMAS
# ==============================================================================

LOGIN_SCHEMA: ValidationSchema = {
    "email": FieldRule(required=True, pattern=EMAIL_REGEX, custom=_check_login_email),
    "password": FieldRule(required=True, min_length=6, custom=_check_login_password),
}

REGISTER_SCHEMA: ValidationSchema = {
    "name": FieldRule(required=True, min_length=2, max_length=50, custom=_check_name),
    "email": FieldRule(
        required=True, pattern=EMAIL_REGEX, custom=_check_register_email
    ),
    "password": FieldRule(
        required=True, min_length=6, custom=_check_register_password
    ),
    "confirm_password": FieldRule(required=True, custom=_check_confirm_password),
}

SESSION_SCHEMA: ValidationSchema = {
    "title": FieldRule(required=True, min_length=3, max_length=100, custom=_check_title),
    "tags": FieldRule(custom=_check_tags),
    "json_file_url": FieldRule(custom=_check_json_file_url),
    "status": FieldRule(custom=_check_status),
}


# ==============================================================================
# SERVER HELPERS
# ==============================================================================


def create_server_validation_response(errors: Mapping[str, str]) -> Dict[str, Any]:
    """Build the failure envelope for a set of field errors."""
    first_error = next(iter(errors.values()), None)
    return {
        "success": False,
        "kind": "validation",
        "code": "VALIDATION_ERROR",
        "message": first_error or "Validation failed",
        "errors": dict(errors),
    }


def validate_server_client_match(
    client_errors: Mapping[str, str], server_errors: Mapping[str, str]
) -> bool:
    """True when both sides flag exactly the same set of fields."""
    return set(client_errors) == set(server_errors)


def format_validation_errors(errors: Mapping[str, str]) -> str:
    messages = list(errors.values())
    if len(messages) == 1:
        return messages[0]
    return "Please fix the following errors:\n• " + "\n• ".join(messages)
