"""Tests for operator tokens and example permissions."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from core.config import Settings
from core.errors import AuthenticationError, AuthorizationError
from core.examples import get_example
from security.auth import (
    Operator,
    Role,
    TokenSigner,
    authorize_example,
    can_run,
    generate_key_pair,
)


@pytest.fixture(scope="module")
def key_pair():
    """Generated RSA key pair as (private_pem, public_pem)."""
    return generate_key_pair()


@pytest.fixture
def signer(key_pair):
    """Signer over the generated key pair."""
    private_key, public_key = key_pair
    return TokenSigner(public_key, private_key, audience="buyer-api", issuer="buyer-auth")


def operator(role):
    return Operator(user_id="tester", role=role, expires_at=datetime.now(timezone.utc))


class TestTokenSigner:
    """Tests for token issue and verification."""

    def test_issue_and_verify(self, signer):
        """Test that an issued token names the same operator."""
        result = signer.verify(signer.issue("alice", Role.TRADER))

        assert result.user_id == "alice"
        assert result.role is Role.TRADER
        assert result.expires_at > datetime.now(timezone.utc)

    def test_wrong_audience(self, signer, key_pair):
        """Test that tokens for another audience are rejected."""
        private_key, public_key = key_pair
        other = TokenSigner(public_key, private_key, audience="other-api", issuer="buyer-auth")

        with pytest.raises(AuthenticationError, match="(?i)audience"):
            signer.verify(other.issue("alice", Role.VIEWER))

    def test_foreign_key(self, signer):
        """Test that tokens signed with another key are rejected."""
        private_key, public_key = generate_key_pair()
        other = TokenSigner(public_key, private_key)

        with pytest.raises(AuthenticationError):
            signer.verify(other.issue("mallory", Role.ADMIN))

    def test_expired(self, key_pair):
        """Test that expired tokens are rejected."""
        private_key, public_key = key_pair
        expired = TokenSigner(public_key, private_key, expiry_minutes=-1)

        with pytest.raises(AuthenticationError, match="expired"):
            expired.verify(expired.issue("alice", Role.VIEWER))

    def test_unknown_role(self, signer, key_pair):
        """Test that a role outside admin/trader/viewer is rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "alice",
                "role": "superuser",
                "aud": "buyer-api",
                "iss": "buyer-auth",
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            key_pair[0],
            algorithm="RS256",
        )

        with pytest.raises(AuthenticationError, match="Unknown role"):
            signer.verify(token)

    def test_garbage_token(self, signer):
        """Test that malformed tokens are rejected."""
        with pytest.raises(AuthenticationError):
            signer.verify("not-a-token")

    def test_verify_only_signer_cannot_issue(self, key_pair):
        """Test that a signer without a private key refuses to issue."""
        verifier = TokenSigner(key_pair[1])

        assert verifier.can_issue is False
        with pytest.raises(AuthenticationError):
            verifier.issue("alice", Role.VIEWER)

    def test_from_settings_generates_keys(self, tmp_path):
        """Test that missing key files yield a generated pair and configured claims."""
        settings = Settings(
            jwt_jwks_public_path=str(tmp_path / "missing-public.pem"),
            jwt_jwks_private_path=str(tmp_path / "missing-private.pem"),
            api_jwt_audience="aud",
            api_jwt_issuer="iss",
            jwt_expiry_minutes=5,
        )

        signer = TokenSigner.from_settings(settings)

        assert (signer.audience, signer.issuer, signer.expiry_minutes) == ("aud", "iss", 5)
        assert signer.can_issue is True

    def test_from_settings_reads_key_files(self, tmp_path, key_pair):
        """Test that configured key files are used as is."""
        private_key, public_key = key_pair
        (tmp_path / "public.pem").write_text(public_key)
        (tmp_path / "private.pem").write_text(private_key)
        settings = Settings(
            jwt_jwks_public_path=str(tmp_path / "public.pem"),
            jwt_jwks_private_path=str(tmp_path / "private.pem"),
        )

        signer = TokenSigner.from_settings(settings)

        assert signer.public_key == public_key
        assert signer.private_key == private_key


class TestExamplePermissions:
    """Tests for role checks against the example registry."""

    @pytest.mark.parametrize("role", list(Role))
    def test_any_role_runs_read_only_examples(self, role):
        """Test that listing filter sets is open to every role."""
        assert can_run(role, get_example("list-account-filter-sets")) is True

    @pytest.mark.parametrize("slug", ["create-account-filter-set", "update-client-buyer"])
    def test_viewer_cannot_run_mutating_examples(self, slug):
        """Test that viewers are refused examples that change resources."""
        with pytest.raises(AuthorizationError) as exc_info:
            authorize_example(operator(Role.VIEWER), get_example(slug))

        assert exc_info.value.error_detail.http_status == 403
        assert exc_info.value.error_detail.details == {"example": slug, "role": "viewer"}

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.TRADER])
    def test_traders_and_admins_run_mutating_examples(self, role):
        """Test that trader and admin roles may change resources."""
        authorize_example(operator(role), get_example("update-client-buyer"))
