"""Security modules for authentication and authorization."""

from security.auth import (
    Role,
    Operator,
    MUTATING_ROLES,
    TokenSigner,
    generate_key_pair,
    can_run,
    authorize_example,
    current_operator,
)

__all__ = [
    "Role",
    "Operator",
    "MUTATING_ROLES",
    "TokenSigner",
    "generate_key_pair",
    "can_run",
    "authorize_example",
    "current_operator",
]
