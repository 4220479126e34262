"""
Unit tests for the auth error lookup table.
"""
import pytest

from app.core.auth_errors import (
    UNKNOWN_USER_MESSAGE,
    VALIDATION_MESSAGES,
    get_auth_error_field,
    get_auth_error_message,
    is_network_error,
    parse_auth_error,
)


class TestMessageRules:
    @pytest.mark.parametrize("message,code,field", [
        ("Email not confirmed", "EMAIL_CONFIRMATION_REQUIRED", "email"),
        ("Invalid login credentials", "INVALID_CREDENTIALS", "email"),
        ("User already registered", "EMAIL_EXISTS", "email"),
        ("Password should be at least 8 characters", "WEAK_PASSWORD", "password"),
        ("Invalid email", "INVALID_EMAIL", "email"),
        ("Too many requests", "RATE_LIMIT", None),
        ("Failed to fetch", "NETWORK_ERROR", None),
        ("Signup is disabled", "SIGNUP_DISABLED", None),
    ])
    def test_known_messages(self, message, code, field):
        parsed = parse_auth_error({"message": message})
        assert parsed.code == code
        assert parsed.field == field
        assert parsed.message == message

    def test_match_is_case_insensitive(self):
        assert parse_auth_error("INVALID LOGIN CREDENTIALS").code == "INVALID_CREDENTIALS"

    def test_confirmation_wins_over_invalid_email(self):
        parsed = parse_auth_error("Invalid email: confirmation required")
        assert parsed.code == "EMAIL_CONFIRMATION_REQUIRED"

    def test_user_messages_are_verbatim(self):
        assert get_auth_error_message("User already registered") == (
            "An account with this email already exists. Try signing in instead."
        )
        assert get_auth_error_message("weak password") == (
            "Password must be at least 8 characters long and contain a mix of "
            "letters, numbers, and symbols."
        )

    def test_exception_argument(self):
        parsed = parse_auth_error(RuntimeError("Invalid login credentials"))
        assert parsed.code == "INVALID_CREDENTIALS"


class TestCodeRules:
    def test_code_used_when_no_message_matches(self):
        parsed = parse_auth_error({"code": "auth/wrong-password"})
        assert parsed.code == "WRONG_PASSWORD"
        assert parsed.field == "password"
        assert parsed.message == "Wrong password"

    def test_message_rule_beats_code(self):
        parsed = parse_auth_error({"message": "User already registered", "code": "auth/user-not-found"})
        assert parsed.code == "EMAIL_EXISTS"

    def test_user_not_found(self):
        assert get_auth_error_field({"code": "auth/user-not-found"}) == "email"

    def test_too_many_requests(self):
        assert parse_auth_error({"code": "auth/too-many-requests"}).code == "TOO_MANY_REQUESTS"


class TestUnknown:
    def test_unmatched_message(self):
        parsed = parse_auth_error("the moon is made of cheese")
        assert parsed.code == "UNKNOWN_ERROR"
        assert parsed.user_message == UNKNOWN_USER_MESSAGE
        assert parsed.field is None

    def test_none(self):
        parsed = parse_auth_error(None)
        assert parsed.code == "UNKNOWN_ERROR"
        assert parsed.message == "Unknown error"


class TestNetworkDetection:
    def test_by_message(self):
        assert is_network_error("Request timeout")
        assert is_network_error({"message": "Network request failed"})

    def test_by_type(self):
        assert is_network_error(ConnectionError())
        assert is_network_error(TimeoutError())

    def test_by_reported_name(self):
        assert is_network_error({"name": "TypeError", "message": "Load failed"})
        assert is_network_error({"name": "NetworkError"})
        assert not is_network_error({"name": "SyntaxError", "message": "Unexpected token"})
        assert not is_network_error(TypeError("unsupported operand"))

    def test_falsy(self):
        assert not is_network_error(None)
        assert not is_network_error("Invalid login credentials")


def test_validation_messages():
    assert VALIDATION_MESSAGES["password_mismatch"] == "Passwords don't match"
    assert VALIDATION_MESSAGES["terms_required"] == "You must accept the terms and conditions"
