"""Construction of FilterSet request bodies."""

from typing import Any, Dict, Optional

from core.dates import CalendarDate, resolve_date_range
from core.models import CreateFilterSetInput
from core.resource_names import filter_set_path


def build_filter_set(
    inputs: CreateFilterSetInput,
    today: Optional[CalendarDate] = None,
) -> Dict[str, Any]:
    """
    Build the FilterSet body for an account-level create request.

    Optional dimensions are only present when they were supplied.

    Args:
        inputs: Validated create inputs
        today: Reference day for the default date range

    Returns:
        FilterSet body in the API's JSON shape

    Raises:
        InvalidArgumentError: If the date range or identifiers are invalid
    """
    date_range = resolve_date_range(inputs.start_date, inputs.end_date, today)

    body: Dict[str, Any] = {
        "name": filter_set_path(
            inputs.bidder_resource_id,
            inputs.account_resource_id,
            inputs.resource_id,
        ),
        "absoluteDateRange": date_range.to_api(),
    }

    if inputs.creative_id is not None:
        body["creativeId"] = inputs.creative_id
    if inputs.deal_id is not None:
        # int64 fields travel as strings in the JSON encoding
        body["dealId"] = str(inputs.deal_id)
    if inputs.environment is not None:
        body["environment"] = inputs.environment.value
    if inputs.format is not None:
        body["format"] = inputs.format.value
    if inputs.platforms is not None:
        body["platforms"] = [platform.value for platform in inputs.platforms]
    if inputs.seller_network_ids is not None:
        body["sellerNetworkIds"] = list(inputs.seller_network_ids)
    if inputs.time_series_granularity is not None:
        body["timeSeriesGranularity"] = inputs.time_series_granularity.value

    return body
