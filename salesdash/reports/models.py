"""
Sales Report Data Model

Immutable records for the multi-channel sales report:

- ChannelRecord: one sales channel inside one branch
- BranchRecord: one physical or virtual sales location
- WebsiteRecord: the online storefront
- SalesReport: aggregate root (branches + website)

Python attributes are snake_case; the persisted JSON shape uses camelCase
aliases (avgOrderValue, localizedName, ...). Derived fields are carried on
the records but only the aggregation engine computes them.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChannelName(str, Enum):
    """Fixed channel identifiers"""
    CALL_CENTRE = "Call Centre"  # in-house
    INSTASHOP = "Insta"  # delivery app A
    TALABAT = "Talabat"  # delivery app B

    @property
    def display_label(self) -> str:
        return CHANNEL_DISPLAY_LABELS[self]


CHANNEL_DISPLAY_LABELS: Dict[ChannelName, str] = {
    ChannelName.CALL_CENTRE: "Call Centre",
    ChannelName.INSTASHOP: "Instashop",
    ChannelName.TALABAT: "Talabat",
}


class RecordModel(BaseModel):
    """Base for all report records: frozen, camelCase on the wire"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# CHANNELS
# =============================================================================

class ChannelInput(RecordModel):
    """Leaf fields of a channel, as entered by an editor or decoded from a document"""
    name: ChannelName
    sales: float = Field(default=0.0, ge=0)
    orders: int = Field(default=0, ge=0)
    cancelled_orders: int = Field(default=0, ge=0)
    cancelled_value: float = Field(default=0.0, ge=0)


class ChannelRecord(ChannelInput):
    """Channel with its derived average order value"""
    avg_order_value: float = Field(default=0.0, ge=0)


# =============================================================================
# BRANCHES
# =============================================================================

class BranchRecord(RecordModel):
    """A sales location and its channels"""
    name: str
    localized_name: str = Field(
        default="",
        validation_alias=AliasChoices("localizedName", "localized_name", "arabicName"),
    )
    channels: List[ChannelRecord] = Field(default_factory=list)
    total_sales: float = Field(default=0.0, ge=0)
    total_orders: int = Field(default=0, ge=0)
    avg_order_value: float = Field(default=0.0, ge=0)


# =============================================================================
# WEBSITE
# =============================================================================

class WebsiteInput(RecordModel):
    """Leaf fields of the online storefront"""
    visits: int = Field(default=0, ge=0)
    total_orders: int = Field(default=0, ge=0)
    completed_orders: int = Field(default=0, ge=0)
    cancelled_orders: int = Field(default=0, ge=0)
    total_sales: float = Field(default=0.0, ge=0)
    cancelled_value: float = Field(default=0.0, ge=0)


class WebsiteRecord(WebsiteInput):
    """Storefront with derived rates (percentages on a 0-100 scale)"""
    conversion_rate: float = Field(default=0.0, ge=0)
    cancellation_rate: float = Field(default=0.0, ge=0)
    avg_order_value: float = Field(default=0.0, ge=0)


# =============================================================================
# REPORT
# =============================================================================

class SalesReport(RecordModel):
    """Aggregate root holding every branch and the website"""
    branches: List[BranchRecord]
    website: WebsiteRecord

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible persisted shape"""
        return self.model_dump(mode="json", by_alias=True)
