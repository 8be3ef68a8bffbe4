"""
Clients for the Ad Exchange Buyer II API.

``DiscoveryBuyerClient`` wraps the generated discovery service; the mock keeps
everything in memory for local development and tests. Both expose the same
blocking methods and return plain JSON dicts.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

from core.config import Settings
from core.errors import ConflictError, NotFoundError
from core.resource_names import client_path

logger = logging.getLogger(__name__)

API_NAME = "adexchangebuyer2"
API_SCOPES = ["https://www.googleapis.com/auth/adexchange.buyer"]


def build_buyer_service(credentials_path: str, version: str = "v2beta1") -> Any:
    """
    Build the discovery service for Ad Exchange Buyer II.

    Args:
        credentials_path: Path to a service-account JSON key
        version: Discovery API version

    Returns:
        Discovery ``Resource`` for the API
    """
    credentials = service_account.Credentials.from_service_account_file(
        credentials_path,
        scopes=API_SCOPES,
    )
    return build(
        API_NAME,
        version,
        credentials=credentials,
        cache_discovery=False,
    )


class DiscoveryBuyerClient:
    """Blocking client backed by the generated discovery service."""

    def __init__(self, service: Any):
        self.service = service

    def create_filter_set(
        self,
        owner_name: str,
        body: Dict[str, Any],
        is_transient: bool = False,
    ) -> Dict[str, Any]:
        return self.service.bidders().accounts().filterSets().create(
            ownerName=owner_name,
            body=body,
            isTransient=is_transient,
        ).execute()

    def list_filter_sets(
        self,
        owner_name: str,
        page_token: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"ownerName": owner_name}
        if page_token:
            params["pageToken"] = page_token
        if page_size:
            params["pageSize"] = page_size
        return self.service.bidders().accounts().filterSets().list(**params).execute()

    def get_client(self, account_id: str, client_account_id: str) -> Dict[str, Any]:
        return self.service.accounts().clients().get(
            accountId=account_id,
            clientAccountId=client_account_id,
        ).execute()

    def update_client(
        self,
        account_id: str,
        client_account_id: str,
        body: Dict[str, Any],
    ) -> Dict[str, Any]:
        return self.service.accounts().clients().update(
            accountId=account_id,
            clientAccountId=client_account_id,
            body=body,
        ).execute()


class MockBuyerClient:
    """
    In-memory buyer client for development.

    Filter sets are kept per owner in creation order. Any client buyer that
    has not been written yet reads back as a canned ACTIVE advertiser.
    """

    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self.filter_sets: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.clients: Dict[str, Dict[str, Any]] = {}
        logger.info("MockBuyerClient initialized")

    def create_filter_set(
        self,
        owner_name: str,
        body: Dict[str, Any],
        is_transient: bool = False,
    ) -> Dict[str, Any]:
        logger.debug(f"Mock create filter set {body.get('name')} (transient={is_transient})")

        owned = self.filter_sets.setdefault(owner_name, {})
        name = body.get("name")
        if name in owned:
            raise ConflictError(
                f"Filter set {name} already exists",
                details={"resource": name},
            )

        filter_set = copy.deepcopy(body)
        if not is_transient:
            owned[name] = filter_set
        return copy.deepcopy(filter_set)

    def list_filter_sets(
        self,
        owner_name: str,
        page_token: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        size = page_size or self.page_size
        start = int(page_token) if page_token else 0
        owned: List[Dict[str, Any]] = list(self.filter_sets.get(owner_name, {}).values())
        page = owned[start:start + size]

        # The API omits empty fields entirely
        response: Dict[str, Any] = {}
        if page:
            response["filterSets"] = copy.deepcopy(page)
        if start + size < len(owned):
            response["nextPageToken"] = str(start + size)
        return response

    def get_client(self, account_id: str, client_account_id: str) -> Dict[str, Any]:
        name = client_path(account_id, client_account_id)
        if name not in self.clients:
            self.clients[name] = {
                "clientAccountId": client_account_id,
                "clientName": f"Mock client {client_account_id}",
                "entityType": "ADVERTISER",
                "role": "CLIENT_DEAL_VIEWER",
                "status": "ACTIVE",
                "visibleToSeller": False,
            }
        return copy.deepcopy(self.clients[name])

    def update_client(
        self,
        account_id: str,
        client_account_id: str,
        body: Dict[str, Any],
    ) -> Dict[str, Any]:
        name = client_path(account_id, client_account_id)
        if name not in self.clients:
            raise NotFoundError(f"Client {name} not found", resource=name)
        self.clients[name] = copy.deepcopy(body)
        return copy.deepcopy(body)


def create_buyer_client(settings: Settings) -> Any:
    """
    Factory for the buyer client selected by the settings.

    Args:
        settings: Application settings

    Returns:
        MockBuyerClient in development, DiscoveryBuyerClient otherwise
    """
    if settings.use_mock:
        return MockBuyerClient()

    service = build_buyer_service(
        settings.google_application_credentials,
        settings.buyer_api_version,
    )
    logger.info(f"Built {API_NAME} {settings.buyer_api_version} discovery service")
    return DiscoveryBuyerClient(service)
