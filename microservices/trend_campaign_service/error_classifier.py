"""
Platform Error Classifier

Maps an advertising platform failure to an ErrorCategory and HTTP-style
status. Works on PlatformCallError instances, raw GoogleAdsFailure
payloads (snake_case or the camelCase REST form) and arbitrary exceptions.
Never raises: anything it cannot read degrades to the generic server
classification.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from .models import ClassifiedError, ErrorCategory, PlatformErrorDetail
from .protocols import PlatformCallError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.AUTHENTICATION: 401,
    ErrorCategory.AUTHORIZATION: 403,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.RATE_LIMITED: 429,
    ErrorCategory.SERVER: 500,
}

# Highest precedence first
PRECEDENCE = [
    ErrorCategory.VALIDATION,
    ErrorCategory.AUTHENTICATION,
    ErrorCategory.AUTHORIZATION,
    ErrorCategory.NOT_FOUND,
    ErrorCategory.RATE_LIMITED,
]

VALIDATION_TYPES = {
    "range_error",
    "currency_error",
    "string_length_error",
    "field_error",
}

VALIDATION_VALUES = {
    "DUPLICATE_CAMPAIGN_NAME",
    "DUPLICATE_NAME",
    "TOO_LOW",
    "TOO_HIGH",
    "VALUE_NOT_MULTIPLE_OF_BILLABLE_UNIT",
}

TYPE_CATEGORIES = {
    "authentication_error": ErrorCategory.AUTHENTICATION,
    "authorization_error": ErrorCategory.AUTHORIZATION,
    "resource_not_found_error": ErrorCategory.NOT_FOUND,
    "not_found_error": ErrorCategory.NOT_FOUND,
    "quota_error": ErrorCategory.RATE_LIMITED,
}

# Failures without sub-errors, keyed by HTTP status or the envelope's status name
HTTP_STATUS_CATEGORIES = {
    401: ErrorCategory.AUTHENTICATION,
    403: ErrorCategory.AUTHORIZATION,
    404: ErrorCategory.NOT_FOUND,
    429: ErrorCategory.RATE_LIMITED,
}

RPC_STATUS_CATEGORIES = {
    "UNAUTHENTICATED": ErrorCategory.AUTHENTICATION,
    "PERMISSION_DENIED": ErrorCategory.AUTHORIZATION,
    "NOT_FOUND": ErrorCategory.NOT_FOUND,
    "RESOURCE_EXHAUSTED": ErrorCategory.RATE_LIMITED,
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _first_item(mapping: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return the single (key, value) of a oneof-style dict like {"rangeError": "TOO_LOW"}"""
    if not isinstance(mapping, dict) or not mapping:
        return None, None
    key, value = next(iter(mapping.items()))
    return str(key), None if value is None else str(value)


def _get(raw: Dict[str, Any], snake_key: str) -> Any:
    """Read a key in either snake_case or camelCase form"""
    if snake_key in raw:
        return raw[snake_key]
    parts = snake_key.split("_")
    camel_key = parts[0] + "".join(p.title() for p in parts[1:])
    return raw.get(camel_key)


def _field_path(raw: Dict[str, Any]) -> Optional[str]:
    location = _get(raw, "location")
    if not isinstance(location, dict):
        return None
    elements = _get(location, "field_path_elements")
    if not isinstance(elements, list):
        return None
    names = [
        str(_get(element, "field_name"))
        for element in elements
        if isinstance(element, dict) and _get(element, "field_name")
    ]
    return ".".join(names) or None


def _detail(raw: Any) -> PlatformErrorDetail:
    if not isinstance(raw, dict):
        return PlatformErrorDetail(message=str(raw) if raw else "Unknown error")

    code, value = _first_item(_get(raw, "error_code"))
    _, trigger = _first_item(_get(raw, "trigger"))
    message = raw.get("message")

    return PlatformErrorDetail(
        code=_snake(code) if code else "UNKNOWN",
        type=value or "UNKNOWN",
        message=str(message) if message else "Unknown error",
        field=_field_path(raw),
        trigger=trigger,
    )


def categorize(detail: PlatformErrorDetail) -> Optional[ErrorCategory]:
    """Category of a single sub-error, or None when it matches no rule"""
    if detail.code in VALIDATION_TYPES or detail.type in VALIDATION_VALUES:
        return ErrorCategory.VALIDATION
    return TYPE_CATEGORIES.get(detail.code)


def _unwrap_payload(payload: Dict[str, Any]) -> Tuple[List[Any], Optional[str], Optional[str]]:
    """Pull (errors, request_id, message) out of the known payload shapes.

    Handles a bare failure {"errors": [...], "request_id": ...} and the REST
    envelope {"error": {"message": ..., "details": [{"errors": [...], "requestId": ...}]}}.
    """
    errors = payload.get("errors")
    request_id = _get(payload, "request_id")
    message = payload.get("message")

    envelope = payload.get("error")
    if isinstance(envelope, dict):
        message = message or envelope.get("message")
        for detail in envelope.get("details") or []:
            if not isinstance(detail, dict):
                continue
            if errors is None and isinstance(detail.get("errors"), list):
                errors = detail["errors"]
            request_id = request_id or _get(detail, "request_id")

    if not isinstance(errors, list):
        errors = []
    return errors, request_id, message


def _status_category(status_code: Any, status: Any) -> ErrorCategory:
    """Category for a failure with no sub-errors, from its HTTP status or status name"""
    if isinstance(status_code, int) and status_code in HTTP_STATUS_CATEGORIES:
        return HTTP_STATUS_CATEGORIES[status_code]
    if isinstance(status, str) and status in RPC_STATUS_CATEGORIES:
        return RPC_STATUS_CATEGORIES[status]
    return ErrorCategory.SERVER


def classify_error(error: Any) -> ClassifiedError:
    """Classify a platform failure.

    Structured sub-errors pick the highest-precedence category found among
    them, defaulting to validation (400). Failures with no structured
    sub-errors map their HTTP status (401/403/404/429) or status name
    (UNAUTHENTICATED, PERMISSION_DENIED, NOT_FOUND, RESOURCE_EXHAUSTED);
    anything else (timeouts, transport failures, malformed payloads)
    classifies as a server error (500).
    """
    status_code, status = None, None
    try:
        if isinstance(error, PlatformCallError):
            raw_errors, request_id, message = error.errors, error.request_id, error.message
            status_code, status = error.status_code, error.status
        elif isinstance(error, dict):
            raw_errors, request_id, message = _unwrap_payload(error)
            envelope = error.get("error")
            if isinstance(envelope, dict):
                status_code, status = envelope.get("code"), envelope.get("status")
        elif isinstance(error, BaseException):
            raw_errors, request_id, message = [], None, str(error)
        else:
            raw_errors, request_id, message = [], None, None

        if not isinstance(raw_errors, list):
            raw_errors = []
        details = [_detail(raw) for raw in raw_errors]
    except Exception as e:
        logger.warning(f"Unreadable platform error payload ({type(e).__name__}): {e}")
        details, request_id, message = [], None, None
        status_code, status = None, None

    if not details:
        category = _status_category(status_code, status)
        return ClassifiedError(
            category=category,
            status_code=STATUS_CODES[category],
            message=str(message) if message else "An unexpected error occurred",
            request_id=None if request_id is None else str(request_id),
        )

    found = {categorize(d) for d in details}
    category = next((c for c in PRECEDENCE if c in found), ErrorCategory.VALIDATION)

    return ClassifiedError(
        category=category,
        status_code=STATUS_CODES[category],
        message=details[0].message or "Google Ads API error",
        errors=details,
        request_id=None if request_id is None else str(request_id),
    )


def describe_error(error: Any) -> str:
    """One-line human summary of a platform failure, used in rollback logs"""
    if isinstance(error, PlatformCallError) and isinstance(error.errors, list) and error.errors:
        messages = []
        for raw in error.errors:
            detail = _detail(raw)
            messages.append(detail.message if detail.message != "Unknown error" else detail.type)
        return "; ".join(messages)
    return str(error) or type(error).__name__


__all__ = ["classify_error", "categorize", "describe_error", "STATUS_CODES"]
