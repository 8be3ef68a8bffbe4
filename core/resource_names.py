"""Resource name builders for the Ad Exchange Buyer II namespace."""

from typing import Any

from core.errors import InvalidArgumentError


def _require_id(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(
            f"{field} must be a non-empty string",
            details={"field": field, "value": value},
        )
    return value


def account_owner_path(bidder_id: str, account_id: str) -> str:
    """Owner name of account-level resources: ``bidders/{bidder}/accounts/{account}``."""
    return "bidders/{}/accounts/{}".format(
        _require_id("bidder_id", bidder_id),
        _require_id("account_id", account_id),
    )


def filter_set_path(bidder_id: str, account_id: str, filter_set_id: str) -> str:
    """Name of an account-level filter set."""
    return "{}/filterSets/{}".format(
        account_owner_path(bidder_id, account_id),
        _require_id("filter_set_id", filter_set_id),
    )


def client_path(account_id: str, client_account_id: str) -> str:
    return "accounts/{}/clients/{}".format(
        _require_id("account_id", account_id),
        _require_id("client_account_id", client_account_id),
    )
