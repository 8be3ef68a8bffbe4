"""
Typed input records for the buyer examples.

Inputs arrive form-shaped (every value a string, blanks meaning "not given")
or as JSON. Both are normalised here so the examples only ever see real
booleans, lists and enum members.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Environment(str, Enum):
    """Environment on which an impression occurred."""

    WEB = "WEB"
    APP = "APP"


class CreativeFormat(str, Enum):
    """Creative format of a bid."""

    NATIVE_DISPLAY = "NATIVE_DISPLAY"
    NATIVE_VIDEO = "NATIVE_VIDEO"
    NON_NATIVE_DISPLAY = "NON_NATIVE_DISPLAY"
    NON_NATIVE_VIDEO = "NON_NATIVE_VIDEO"


class Platform(str, Enum):
    """Device platform of an impression."""

    DESKTOP = "DESKTOP"
    TABLET = "TABLET"
    MOBILE = "MOBILE"


class TimeSeriesGranularity(str, Enum):
    """Granularity of time-series metrics returned for a filter set."""

    HOURLY = "HOURLY"
    DAILY = "DAILY"


class ClientStatus(str, Enum):
    """Status of a client buyer."""

    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


class ExampleInput(BaseModel):
    """Base for example inputs: strips whitespace and treats blanks as absent."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: None if isinstance(value, str) and not value.strip() else value
                for key, value in data.items()
            }
        return data


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class CreateFilterSetInput(ExampleInput):
    """Inputs for creating an account-level filter set."""

    bidder_resource_id: str = Field(..., min_length=1, description="Bidder resource ID")
    account_resource_id: str = Field(..., min_length=1, description="Account resource ID")
    resource_id: str = Field(..., min_length=1, description="Filterset resource ID")
    start_date: Optional[str] = Field(None, description="Start date (YYYYMMDD)")
    end_date: Optional[str] = Field(None, description="End date (YYYYMMDD)")
    creative_id: Optional[str] = Field(None, description="Creative ID")
    deal_id: Optional[int] = Field(None, description="Deal ID")
    environment: Optional[Environment] = Field(None, description="Environment")
    format: Optional[CreativeFormat] = Field(None, description="Format")
    platforms: Optional[List[Platform]] = Field(None, description="Platforms")
    seller_network_ids: Optional[List[int]] = Field(None, description="Seller network IDs")
    time_series_granularity: Optional[TimeSeriesGranularity] = Field(
        None, description="Time series granularity"
    )
    is_transient: bool = Field(False, description="Is transient (true/false)")

    @field_validator("platforms", "seller_network_ids", mode="before")
    @classmethod
    def _comma_separated(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("is_transient", mode="before")
    @classmethod
    def _missing_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class ListFilterSetsInput(ExampleInput):
    """Inputs for listing account-level filter sets."""

    bidder_resource_id: str = Field(..., min_length=1, description="Bidder resource ID")
    account_resource_id: str = Field(..., min_length=1, description="Account resource ID")


class UpdateClientBuyerInput(ExampleInput):
    """Inputs for changing the status of a client buyer."""

    account_id: str = Field(..., min_length=1, description="Account ID")
    client_account_id: str = Field(..., min_length=1, description="Client account ID")
    status: ClientStatus = Field(ClientStatus.DISABLED, description="New client status")

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return ClientStatus.DISABLED if value is None else value


def describe_inputs(model: type[BaseModel]) -> List[Dict[str, Any]]:
    """Describe a model's fields as example input parameters."""
    return [
        {
            "name": name,
            "display": field.description or name,
            "required": field.is_required(),
        }
        for name, field in model.model_fields.items()
    ]
