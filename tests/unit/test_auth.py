"""Unit tests for admin token decoding."""

import time
from unittest.mock import patch

import jwt
import pytest

from beatstore.api.middleware.auth import AuthError, AuthErrorCode, decode_admin_token


# Test JWT secret for unit tests
TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"


def create_test_token(
    sub: str = "operator",
    role: str | None = "admin",
    exp_offset: int = 3600,
    secret: str = TEST_JWT_SECRET,
    omit: tuple[str, ...] = (),
) -> str:
    """Create a test admin token.

    Args:
        sub: Subject.
        role: Role claim, left out when None.
        exp_offset: Seconds from now for expiration (negative for expired).
        secret: Secret for signing.
        omit: Claims to leave out.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {"sub": sub, "exp": now + exp_offset, "iat": now}
    if role is not None:
        payload["role"] = role
    for claim in omit:
        payload.pop(claim, None)
    return jwt.encode(payload, secret, algorithm="HS256")


class TestDecodeAdminToken:
    """Tests for decode_admin_token function."""

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_decodes_valid_token(self, mock_settings: any) -> None:
        """Test that subject and role are returned."""
        mock_settings.return_value.admin_jwt_secret = TEST_JWT_SECRET

        admin = decode_admin_token(create_test_token())

        assert admin.subject == "operator"
        assert admin.role == "admin"

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_role_is_optional(self, mock_settings: any) -> None:
        """Test that a token without role decodes with role None."""
        mock_settings.return_value.admin_jwt_secret = TEST_JWT_SECRET

        admin = decode_admin_token(create_test_token(role=None))

        assert admin.role is None

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_expired_token(self, mock_settings: any) -> None:
        """Test decode_admin_token raises AuthError for expired token."""
        mock_settings.return_value.admin_jwt_secret = TEST_JWT_SECRET

        with pytest.raises(AuthError) as exc_info:
            decode_admin_token(create_test_token(exp_offset=-3600))

        assert exc_info.value.code == AuthErrorCode.TOKEN_EXPIRED

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_invalid_signature(self, mock_settings: any) -> None:
        """Test that tokens signed with another secret are rejected."""
        mock_settings.return_value.admin_jwt_secret = TEST_JWT_SECRET

        with pytest.raises(AuthError) as exc_info:
            decode_admin_token(create_test_token(secret="some-other-secret"))

        assert exc_info.value.code == AuthErrorCode.INVALID_SIGNATURE

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_missing_subject(self, mock_settings: any) -> None:
        """Test that sub is required."""
        mock_settings.return_value.admin_jwt_secret = TEST_JWT_SECRET

        with pytest.raises(AuthError) as exc_info:
            decode_admin_token(create_test_token(omit=("sub",)))

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN
        assert "sub" in exc_info.value.message

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_malformed_token(self, mock_settings: any) -> None:
        """Test that garbage input is rejected."""
        mock_settings.return_value.admin_jwt_secret = TEST_JWT_SECRET

        with pytest.raises(AuthError) as exc_info:
            decode_admin_token("not-a-jwt")

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN

    @patch("beatstore.api.middleware.auth.get_settings")
    def test_not_configured(self, mock_settings: any) -> None:
        """Test that an empty secret disables admin auth."""
        mock_settings.return_value.admin_jwt_secret = ""

        with pytest.raises(AuthError) as exc_info:
            decode_admin_token(create_test_token())

        assert exc_info.value.code == AuthErrorCode.NOT_CONFIGURED
