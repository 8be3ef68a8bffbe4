"""
Ad Exchange Buyer II manager with filter set and client buyer operations.

Provides a unified async interface over a blocking buyer client, with retry
on transient API failures.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from core.buyer_client import create_buyer_client
from core.config import Settings
from core.dates import CalendarDate
from core.errors import BuyerAPIError, map_api_exception
from core.filter_sets import build_filter_set
from core.models import (
    ClientStatus,
    CreateFilterSetInput,
    ListFilterSetsInput,
    UpdateClientBuyerInput,
)
from core.resource_names import account_owner_path, client_path

logger = logging.getLogger(__name__)


def _is_retryable(exception: BaseException) -> bool:
    return isinstance(exception, BuyerAPIError) and exception.retryable


class AdExchangeBuyerManager:
    """
    Manager for Ad Exchange Buyer II operations.

    Runs each blocking client call in a worker thread and maps failures to
    typed errors.
    """

    def __init__(
        self,
        client: Any,  # DiscoveryBuyerClient or MockBuyerClient
        max_attempts: int = 3,
        retry_initial: float = 1.0,
        retry_max: float = 10.0,
        use_mock: bool = False,
    ):
        """
        Initialize the manager.

        Args:
            client: Buyer client (real or mock)
            max_attempts: Attempts per call before giving up on retryable errors
            retry_initial: Initial backoff in seconds
            retry_max: Maximum backoff in seconds
            use_mock: Whether the client is the in-memory mock
        """
        self.client = client
        self.max_attempts = max_attempts
        self.retry_initial = retry_initial
        self.retry_max = retry_max
        self.use_mock = use_mock
        logger.info(f"AdExchangeBuyerManager initialized (mock={use_mock})")

    async def create_account_filter_set(
        self,
        inputs: CreateFilterSetInput,
        today: Optional[CalendarDate] = None,
    ) -> Dict[str, Any]:
        """
        Create an account-level filter set.

        Args:
            inputs: Validated create inputs
            today: Reference day for the default date range

        Returns:
            The created FilterSet
        """
        owner_name = account_owner_path(inputs.bidder_resource_id, inputs.account_resource_id)
        body = build_filter_set(inputs, today)

        logger.info(f"Creating account-level filter set for ownerName {owner_name}")

        result = await self._call(
            "create_filter_set",
            self.client.create_filter_set,
            owner_name,
            body,
            inputs.is_transient,
            resource=body["name"],
            # filterSets.create is not idempotent
            retry=False,
        )

        logger.info(f"Created filter set {result.get('name', body['name'])}")
        return result

    async def list_account_filter_sets(self, inputs: ListFilterSetsInput) -> List[Dict[str, Any]]:
        """
        List all account-level filter sets of an owner, across every page.

        Args:
            inputs: Validated list inputs

        Returns:
            FilterSets in the order the API returns them
        """
        owner_name = account_owner_path(inputs.bidder_resource_id, inputs.account_resource_id)

        filter_sets: List[Dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            response = await self._call(
                "list_filter_sets",
                self.client.list_filter_sets,
                owner_name,
                page_token,
                resource=owner_name,
            )
            filter_sets.extend(response.get("filterSets", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
            logger.debug(f"Fetching next filter set page for {owner_name}")

        logger.info(f"Found {len(filter_sets)} account-level filter sets for {owner_name}")
        return filter_sets

    async def update_client_buyer(self, inputs: UpdateClientBuyerInput) -> Dict[str, Any]:
        """
        Change the status of a client buyer.

        Reads the current client, sets its status and writes it back.

        Args:
            inputs: Validated update inputs

        Returns:
            The updated Client
        """
        name = client_path(inputs.account_id, inputs.client_account_id)

        client = await self._call(
            "get_client",
            self.client.get_client,
            inputs.account_id,
            inputs.client_account_id,
            resource=name,
        )

        status = ClientStatus(inputs.status).value
        if client.get("status") == status:
            logger.info(f"Client {name} already {status}, writing back unchanged")
        client["status"] = status

        result = await self._call(
            "update_client",
            self.client.update_client,
            inputs.account_id,
            inputs.client_account_id,
            client,
            resource=name,
        )

        logger.info(f"Updated client {name} to status {status}")
        return result

    async def _call(
        self,
        operation: str,
        fn: Callable[..., Dict[str, Any]],
        *args: Any,
        resource: Optional[str] = None,
        retry: bool = True,
    ) -> Dict[str, Any]:
        """
        Execute a blocking client call with retry logic.

        Args:
            operation: Operation name for logs
            fn: Client method to call
            *args: Positional arguments for fn
            resource: Resource name the call targets, for error details
            retry: Whether retryable errors are retried

        Returns:
            The call's JSON response
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts if retry else 1),
            wait=(
                wait_exponential(multiplier=self.retry_initial, max=self.retry_max)
                + wait_random(0, self.retry_initial)
            ),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                try:
                    return await asyncio.to_thread(fn, *args)
                except BuyerAPIError as e:
                    logger.error(f"{operation} failed for {resource}: {e}")
                    raise
                except Exception as e:
                    # Map to our error types
                    error = map_api_exception(e, resource=resource)
                    logger.error(f"{operation} failed for {resource}: {error}")
                    raise error from e

        # reraise=True means the loop never exits without returning or raising
        raise AssertionError("unreachable")


def create_buyer_manager(settings: Settings, client: Optional[Any] = None) -> AdExchangeBuyerManager:
    """
    Factory function to create AdExchangeBuyerManager.

    Args:
        settings: Application settings
        client: Buyer client to use instead of the one the settings select

    Returns:
        Configured AdExchangeBuyerManager instance
    """
    if client is None:
        client = create_buyer_client(settings)

    return AdExchangeBuyerManager(
        client=client,
        max_attempts=settings.buyer_api_max_attempts,
        retry_initial=settings.buyer_api_retry_initial,
        retry_max=settings.buyer_api_retry_max,
        use_mock=settings.use_mock,
    )
