"""
Auth error lookup: provider error text → stable code + user-facing copy.

The auth service raises provider-style messages ("Invalid login
credentials", "User already registered", ...). `parse_auth_error` maps
them onto the fixed table below; the first matching rule wins, and
anything unrecognised falls through to UNKNOWN_ERROR.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class ParsedAuthError:
    code: str
    message: str
    user_message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class _MessageRule:
    needles: tuple[str, ...]
    code: str
    user_message: str
    field: Optional[str] = None


# Order matters: "email not confirmed" must win over the generic
# "invalid email" rule, etc.
_MESSAGE_RULES: tuple[_MessageRule, ...] = (
    _MessageRule(
        ("email not confirmed", "confirmation required"),
        "EMAIL_CONFIRMATION_REQUIRED",
        "Please check your email and click the confirmation link before signing in.",
        "email",
    ),
    _MessageRule(
        ("invalid login credentials", "invalid email or password"),
        "INVALID_CREDENTIALS",
        "Invalid email or password. Please check your credentials and try again.",
        "email",
    ),
    _MessageRule(
        ("user already registered", "email address is already registered"),
        "EMAIL_EXISTS",
        "An account with this email already exists. Try signing in instead.",
        "email",
    ),
    _MessageRule(
        ("password should be at least", "weak password"),
        "WEAK_PASSWORD",
        "Password must be at least 8 characters long and contain a mix of "
        "letters, numbers, and symbols.",
        "password",
    ),
    _MessageRule(
        ("invalid email", "email address is invalid"),
        "INVALID_EMAIL",
        "Please enter a valid email address.",
        "email",
    ),
    _MessageRule(
        ("too many requests", "rate limit"),
        "RATE_LIMIT",
        "Too many attempts. Please wait a few minutes before trying again.",
    ),
    _MessageRule(
        ("network", "fetch", "connection"),
        "NETWORK_ERROR",
        "Network error. Please check your connection and try again.",
    ),
    _MessageRule(
        ("signup is disabled", "registration disabled"),
        "SIGNUP_DISABLED",
        "New account registration is currently disabled. Please contact support.",
    ),
)

# code → (parsed code, fallback message, user message, field)
_CODE_RULES: dict[str, tuple[str, str, str, Optional[str]]] = {
    "auth/user-not-found": (
        "USER_NOT_FOUND", "User not found",
        "No account found with this email address.", "email",
    ),
    "auth/wrong-password": (
        "WRONG_PASSWORD", "Wrong password",
        "Incorrect password. Please try again.", "password",
    ),
    "auth/too-many-requests": (
        "TOO_MANY_REQUESTS", "Too many requests",
        "Too many failed attempts. Please wait before trying again.", None,
    ),
}

UNKNOWN_USER_MESSAGE = "An unexpected error occurred. Please try again."

VALIDATION_MESSAGES = {
    "email": "Please enter a valid email address",
    "password_min": "Password must be at least 8 characters",
    "password_mismatch": "Passwords don't match",
    "terms_required": "You must accept the terms and conditions",
}


def required_message(field: str) -> str:
    return f"{field} is required"


def _extract(error: Any) -> tuple[Optional[str], Optional[str]]:
    """Pull (message, code) out of an exception, mapping or plain string."""
    if error is None:
        return None, None
    if isinstance(error, str):
        return error, None
    if isinstance(error, Mapping):
        return error.get("message"), error.get("code")
    message = getattr(error, "message", None)
    if message is None and isinstance(error, BaseException) and error.args:
        message = str(error.args[0])
    return message, getattr(error, "code", None)


def parse_auth_error(error: Any) -> ParsedAuthError:
    message, code = _extract(error)

    if message:
        lowered = message.lower()
        for rule in _MESSAGE_RULES:
            if any(needle in lowered for needle in rule.needles):
                return ParsedAuthError(
                    code=rule.code,
                    message=message,
                    user_message=rule.user_message,
                    field=rule.field,
                )

    if code in _CODE_RULES:
        parsed_code, fallback, user_message, field = _CODE_RULES[code]
        return ParsedAuthError(
            code=parsed_code,
            message=message or fallback,
            user_message=user_message,
            field=field,
        )

    return ParsedAuthError(
        code="UNKNOWN_ERROR",
        message=message or "Unknown error",
        user_message=UNKNOWN_USER_MESSAGE,
    )


def get_auth_error_message(error: Any) -> str:
    return parse_auth_error(error).user_message


def get_auth_error_field(error: Any) -> Optional[str]:
    return parse_auth_error(error).field


# Error names a browser client reports for failed requests (fetch raises TypeError).
_NETWORK_ERROR_NAMES = {"NetworkError", "TypeError"}


def is_network_error(error: Any) -> bool:
    """
    True for connection-level failures.

    Matches on the message text, on a client-reported `name` of
    NetworkError or TypeError, and on Python's ConnectionError and
    TimeoutError. A Python TypeError raised here is not a network error.
    """
    if not error:
        return False
    message, _ = _extract(error)
    lowered = (message or "").lower()
    if any(word in lowered for word in ("network", "fetch", "connection", "timeout")):
        return True
    name = error.get("name") if isinstance(error, Mapping) else getattr(error, "name", None)
    if name in _NETWORK_ERROR_NAMES:
        return True
    return isinstance(error, (ConnectionError, TimeoutError))
