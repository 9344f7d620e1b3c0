"""
Aggregation Engine

Recomputes every derived field of a sales report bottom-up:
channel -> branch, and website leaf fields -> website rates.

All functions are pure. They never mutate their inputs and every division
is guarded so degenerate inputs (zero orders, zero visits) yield 0.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Union

from salesdash.reports.models import (
    BranchRecord,
    ChannelInput,
    ChannelName,
    ChannelRecord,
    SalesReport,
    WebsiteInput,
    WebsiteRecord,
)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _percentage(numerator: float, denominator: float) -> float:
    return (numerator / denominator) * 100 if denominator > 0 else 0.0


# =============================================================================
# RECORD LEVEL
# =============================================================================

def recompute_channel(channel: ChannelInput) -> ChannelRecord:
    """Build a channel record whose average order value matches its leaves"""
    return ChannelRecord(
        name=channel.name,
        sales=channel.sales,
        orders=channel.orders,
        cancelled_orders=channel.cancelled_orders,
        cancelled_value=channel.cancelled_value,
        avg_order_value=_ratio(channel.sales, channel.orders),
    )


def build_branch(
    name: str,
    localized_name: str,
    channels: Sequence[ChannelInput],
) -> BranchRecord:
    """Build a branch from its channels, deriving totals and average"""
    records = [recompute_channel(c) for c in channels]
    total_sales = sum(c.sales for c in records)
    total_orders = sum(c.orders for c in records)

    return BranchRecord(
        name=name,
        localized_name=localized_name,
        channels=records,
        total_sales=total_sales,
        total_orders=total_orders,
        avg_order_value=_ratio(total_sales, total_orders),
    )


def recompute_branch(branch: BranchRecord) -> BranchRecord:
    """Recompute channel averages and branch totals"""
    return build_branch(branch.name, branch.localized_name, branch.channels)


def recompute_channel_edit(
    branch: BranchRecord,
    channel_index: int,
    updated_channel: ChannelInput,
) -> BranchRecord:
    """
    Replace one channel of a branch and recompute the branch.

    Args:
        branch: Branch being edited
        channel_index: Position of the channel in ``branch.channels``
        updated_channel: New leaf values; any derived value it carries is ignored

    Returns:
        New branch record

    Raises:
        IndexError: If channel_index is outside the branch's channel list
    """
    if not 0 <= channel_index < len(branch.channels):
        raise IndexError(
            f"Channel index {channel_index} out of range for branch "
            f"'{branch.name}' with {len(branch.channels)} channels"
        )

    channels: List[ChannelInput] = list(branch.channels)
    channels[channel_index] = updated_channel
    return build_branch(branch.name, branch.localized_name, channels)


def recompute_website_edit(leaf_fields: WebsiteInput) -> WebsiteRecord:
    """Derive conversion rate, cancellation rate and average order value"""
    return WebsiteRecord(
        visits=leaf_fields.visits,
        total_orders=leaf_fields.total_orders,
        completed_orders=leaf_fields.completed_orders,
        cancelled_orders=leaf_fields.cancelled_orders,
        total_sales=leaf_fields.total_sales,
        cancelled_value=leaf_fields.cancelled_value,
        conversion_rate=_percentage(leaf_fields.total_orders, leaf_fields.visits),
        cancellation_rate=_percentage(leaf_fields.cancelled_orders, leaf_fields.total_orders),
        avg_order_value=_ratio(leaf_fields.total_sales, leaf_fields.total_orders),
    )


# =============================================================================
# REPORT LEVEL
# =============================================================================

def recompute_report(report: SalesReport) -> SalesReport:
    """Recompute every derived field of a candidate report"""
    return SalesReport(
        branches=[recompute_branch(b) for b in report.branches],
        website=recompute_website_edit(report.website),
    )


def apply_branch_edit(
    report: SalesReport,
    branch_index: int,
    channel_index: int,
    updated_channel: ChannelInput,
) -> SalesReport:
    """Return a new report with one channel of one branch replaced"""
    if not 0 <= branch_index < len(report.branches):
        raise IndexError(
            f"Branch index {branch_index} out of range for report "
            f"with {len(report.branches)} branches"
        )

    branches = list(report.branches)
    branches[branch_index] = recompute_channel_edit(
        branches[branch_index], channel_index, updated_channel
    )
    return report.model_copy(update={"branches": branches})


def apply_website_edit(report: SalesReport, leaf_fields: WebsiteInput) -> SalesReport:
    """Return a new report with the website record replaced"""
    return report.model_copy(update={"website": recompute_website_edit(leaf_fields)})


# =============================================================================
# ROLLUPS
# =============================================================================

@dataclass(frozen=True)
class ReportTotals:
    """Report-wide sales and orders (branches plus website)"""
    total_sales: float
    total_orders: int

    @property
    def avg_order_value(self) -> float:
        return _ratio(self.total_sales, self.total_orders)


@dataclass(frozen=True)
class BranchSummary:
    name: str
    sales: float
    orders: int


@dataclass(frozen=True)
class BranchCancellations:
    branch: str
    cancelled_orders: int
    cancelled_value: float


@dataclass(frozen=True)
class ChannelCancellations:
    """Lost orders and revenue for one channel across all branches"""
    channel: ChannelName
    cancelled_orders: int
    cancelled_value: float
    branches: List[BranchCancellations] = field(default_factory=list)


def aggregate_totals(report: SalesReport) -> ReportTotals:
    """Sum sales and orders across all branches plus the website"""
    total_sales = sum(b.total_sales for b in report.branches) + report.website.total_sales
    total_orders = sum(b.total_orders for b in report.branches) + report.website.total_orders
    return ReportTotals(total_sales=total_sales, total_orders=total_orders)


def channel_distribution(report: SalesReport) -> Dict[str, float]:
    """
    Summed sales per channel across all branches.

    Keys follow the order in which each channel is first seen. Values are
    exact sums; rounding is left to the display layer.
    """
    distribution: Dict[str, float] = {}
    for branch in report.branches:
        for channel in branch.channels:
            key = channel.name.value
            distribution[key] = distribution.get(key, 0.0) + channel.sales
    return distribution


def branch_breakdown(report: SalesReport) -> List[BranchSummary]:
    """Per-branch sales and orders, in report order"""
    return [
        BranchSummary(name=b.name, sales=b.total_sales, orders=b.total_orders)
        for b in report.branches
    ]


def channel_cancellations(
    report: SalesReport,
    channel: Union[ChannelName, str],
) -> ChannelCancellations:
    """
    Cancellation losses of one channel.

    Branches without the channel, or with no cancellations on it, are
    left out of the per-branch rows but the totals still cover every branch.
    """
    channel = ChannelName(channel)
    rows: List[BranchCancellations] = []
    total_orders = 0
    total_value = 0.0

    for branch in report.branches:
        match = next((c for c in branch.channels if c.name == channel), None)
        if match is None:
            continue
        total_orders += match.cancelled_orders
        total_value += match.cancelled_value
        if match.cancelled_orders == 0 and match.cancelled_value == 0:
            continue
        rows.append(
            BranchCancellations(
                branch=branch.name,
                cancelled_orders=match.cancelled_orders,
                cancelled_value=match.cancelled_value,
            )
        )

    return ChannelCancellations(
        channel=channel,
        cancelled_orders=total_orders,
        cancelled_value=total_value,
        branches=rows,
    )
