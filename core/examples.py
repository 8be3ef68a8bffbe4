"""
Registry of runnable buyer examples.

Each example pairs a typed input model with a coroutine that takes the
validated inputs and the buyer manager and returns a JSON-serialisable result.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from core.buyer_manager import AdExchangeBuyerManager
from core.dates import CalendarDate
from core.errors import InvalidArgumentError, NotFoundError
from core.models import (
    CreateFilterSetInput,
    ListFilterSetsInput,
    UpdateClientBuyerInput,
    describe_inputs,
)
from core.resource_names import account_owner_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Example:
    """A named example bound to its input model."""

    slug: str
    name: str
    description: str
    input_model: type[BaseModel]
    run: Callable[..., Awaitable[Dict[str, Any]]]
    mutates: bool = False

    def describe(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "mutates": self.mutates,
            "inputs": describe_inputs(self.input_model),
        }


async def create_account_level_filter_set(
    inputs: CreateFilterSetInput,
    manager: AdExchangeBuyerManager,
    today: Optional[CalendarDate] = None,
) -> Dict[str, Any]:
    owner_name = account_owner_path(inputs.bidder_resource_id, inputs.account_resource_id)
    filter_set = await manager.create_account_filter_set(inputs, today=today)
    return {"owner_name": owner_name, "filter_set": filter_set}


async def list_account_level_filter_sets(
    inputs: ListFilterSetsInput,
    manager: AdExchangeBuyerManager,
    today: Optional[CalendarDate] = None,
) -> Dict[str, Any]:
    owner_name = account_owner_path(inputs.bidder_resource_id, inputs.account_resource_id)
    filter_sets = await manager.list_account_filter_sets(inputs)
    result: Dict[str, Any] = {"owner_name": owner_name, "filter_sets": filter_sets}
    if not filter_sets:
        result["message"] = "No Account-level Filter Sets found."
    return result


async def update_client_buyer(
    inputs: UpdateClientBuyerInput,
    manager: AdExchangeBuyerManager,
    today: Optional[CalendarDate] = None,
) -> Dict[str, Any]:
    client = await manager.update_client_buyer(inputs)
    return {"client": client}


EXAMPLES: Dict[str, Example] = {
    example.slug: example
    for example in [
        Example(
            slug="create-account-filter-set",
            name="RTB Troubleshooting: Create Account-level Filter Set",
            description="Creates an account-level filter set, defaulting to the past week.",
            input_model=CreateFilterSetInput,
            run=create_account_level_filter_set,
            mutates=True,
        ),
        Example(
            slug="list-account-filter-sets",
            name="RTB Troubleshooting: List Account-level Filter Sets",
            description="Retrieves all account-level filter sets of a bidder account.",
            input_model=ListFilterSetsInput,
            run=list_account_level_filter_sets,
        ),
        Example(
            slug="update-client-buyer",
            name="Client Access: Update Client Buyer",
            description="Updates a client buyer's status, disabling it by default.",
            input_model=UpdateClientBuyerInput,
            run=update_client_buyer,
            mutates=True,
        ),
    ]
}


def list_examples() -> List[Dict[str, Any]]:
    return [example.describe() for example in EXAMPLES.values()]


def get_example(slug: str) -> Example:
    """
    Look up an example by slug.

    Raises:
        NotFoundError: If no example has that slug
    """
    try:
        return EXAMPLES[slug]
    except KeyError:
        raise NotFoundError(f"Unknown example: {slug}", resource=slug)


def parse_inputs(example: Example, values: Mapping[str, Any]) -> BaseModel:
    """
    Validate raw input values against an example's input model.

    Raises:
        InvalidArgumentError: With one entry per offending field
    """
    try:
        return example.input_model.model_validate(dict(values))
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in e.errors()
        ]
        raise InvalidArgumentError(
            f"Invalid inputs for {example.slug}",
            details={"errors": errors},
        )


async def run_example(
    slug: str,
    values: Mapping[str, Any],
    manager: AdExchangeBuyerManager,
    today: Optional[CalendarDate] = None,
) -> Dict[str, Any]:
    """
    Validate inputs and run an example.

    Args:
        slug: Example slug
        values: Raw input values
        manager: Buyer manager the example calls
        today: Reference day for examples that default a date range

    Returns:
        The example's result
    """
    example = get_example(slug)
    inputs = parse_inputs(example, values)
    logger.info(f"Running example {example.name!r}")
    return await example.run(inputs, manager, today=today)
