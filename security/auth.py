"""
Operator tokens and example permissions.

Operators call the example runner with RS256 bearer tokens. The role a token
carries decides which registered examples it may run: viewers run read-only
examples, traders and admins also run examples that change filter sets or
client buyers.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from core.config import Settings
from core.errors import AuthenticationError, AuthorizationError
from core.examples import Example

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Operator roles."""

    ADMIN = "admin"
    TRADER = "trader"
    VIEWER = "viewer"


# Roles allowed to run examples that change remote resources
MUTATING_ROLES = frozenset({Role.ADMIN, Role.TRADER})


class Operator(BaseModel):
    """Caller identified by a verified token."""

    user_id: str
    role: Role
    expires_at: datetime


def can_run(role: Role, example: Example) -> bool:
    return not example.mutates or role in MUTATING_ROLES


def authorize_example(operator: Operator, example: Example) -> None:
    """
    Check that an operator may run an example.

    Raises:
        AuthorizationError: If the example mutates and the role is read-only
    """
    if not can_run(operator.role, example):
        raise AuthorizationError(
            f"Role {operator.role.value} may not run {example.slug}",
            details={"example": example.slug, "role": operator.role.value},
        )


def generate_key_pair() -> Tuple[str, str]:
    """Return a fresh ``(private_pem, public_pem)`` RSA pair."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


class TokenSigner:
    """Issues and verifies operator tokens."""

    algorithm = "RS256"

    def __init__(
        self,
        public_key: str,
        private_key: Optional[str] = None,
        audience: str = "buyer-api",
        issuer: str = "buyer-auth",
        expiry_minutes: int = 15,
    ):
        self.public_key = public_key
        self.private_key = private_key
        self.audience = audience
        self.issuer = issuer
        self.expiry_minutes = expiry_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSigner":
        """
        Build a signer from the configured key files.

        A missing public key file means development: a key pair is generated
        in memory and tokens only outlive the process that issued them.
        """
        public_path = Path(settings.jwt_jwks_public_path)
        private_path = Path(settings.jwt_jwks_private_path)

        if public_path.exists():
            public_key = public_path.read_text()
            private_key = private_path.read_text() if private_path.exists() else None
        else:
            logger.warning(f"No public key at {public_path}, signing with a generated key pair")
            private_key, public_key = generate_key_pair()

        return cls(
            public_key,
            private_key,
            audience=settings.api_jwt_audience,
            issuer=settings.api_jwt_issuer,
            expiry_minutes=settings.jwt_expiry_minutes,
        )

    @property
    def can_issue(self) -> bool:
        return self.private_key is not None

    def issue(self, user_id: str, role: Role) -> str:
        """
        Sign a token for an operator.

        Raises:
            AuthenticationError: If no private key is configured
        """
        if not self.can_issue:
            raise AuthenticationError("Token signing is not configured")

        now = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "role": role.value,
            "aud": self.audience,
            "iss": self.issuer,
            "iat": now,
            "exp": now + timedelta(minutes=self.expiry_minutes),
        }
        return jwt.encode(claims, self.private_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Operator:
        """
        Decode a token into the operator it names.

        Raises:
            AuthenticationError: If the signature, audience, issuer, expiry or
                claims are not acceptable
        """
        try:
            claims = jwt.decode(
                token,
                self.public_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["sub", "role", "exp"]},
            )
        except jwt.PyJWTError as e:
            raise AuthenticationError(f"Invalid token: {e}")

        try:
            role = Role(claims["role"])
        except ValueError:
            raise AuthenticationError(f"Unknown role: {claims['role']}")

        return Operator(
            user_id=claims["sub"],
            role=role,
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )


bearer = HTTPBearer(auto_error=False)


async def current_operator(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Operator:
    """FastAPI dependency resolving the bearer token with the app's signer."""
    if credentials is None:
        raise AuthenticationError("Missing bearer token")

    signer: TokenSigner = request.app.state.token_signer
    return signer.verify(credentials.credentials)
