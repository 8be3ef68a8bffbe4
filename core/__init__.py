"""Core modules for the Ad Exchange Buyer II example service."""

from core.errors import (
    BuyerAPIError,
    InvalidArgumentError,
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
    NotFoundError,
    ConflictError,
    TimeoutError,
    ExternalAPIError,
    InternalError,
    map_api_exception,
)
from core.dates import CalendarDate, DateRange, resolve_date_range
from core.resource_names import account_owner_path, filter_set_path, client_path
from core.config import Settings, get_settings
from core.buyer_client import DiscoveryBuyerClient, MockBuyerClient, create_buyer_client
from core.buyer_manager import AdExchangeBuyerManager, create_buyer_manager
from core.examples import Example, EXAMPLES, get_example, list_examples, run_example

__all__ = [
    # Errors
    "BuyerAPIError",
    "InvalidArgumentError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitError",
    "NotFoundError",
    "ConflictError",
    "TimeoutError",
    "ExternalAPIError",
    "InternalError",
    "map_api_exception",
    # Dates and resource names
    "CalendarDate",
    "DateRange",
    "resolve_date_range",
    "account_owner_path",
    "filter_set_path",
    "client_path",
    # Configuration
    "Settings",
    "get_settings",
    # Buyer API
    "DiscoveryBuyerClient",
    "MockBuyerClient",
    "create_buyer_client",
    "AdExchangeBuyerManager",
    "create_buyer_manager",
    # Examples
    "Example",
    "EXAMPLES",
    "get_example",
    "list_examples",
    "run_example",
]
