"""
Report Aggregation Module
"""
from .aggregation import (
    ReportTotals,
    aggregate_totals,
    apply_branch_edit,
    apply_website_edit,
    branch_breakdown,
    channel_cancellations,
    channel_distribution,
    recompute_branch,
    recompute_channel,
    recompute_channel_edit,
    recompute_report,
    recompute_website_edit,
)

__all__ = [
    "ReportTotals",
    "aggregate_totals",
    "apply_branch_edit",
    "apply_website_edit",
    "branch_breakdown",
    "channel_cancellations",
    "channel_distribution",
    "recompute_branch",
    "recompute_channel",
    "recompute_channel_edit",
    "recompute_report",
    "recompute_website_edit",
]
