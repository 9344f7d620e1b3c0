"""
Sales Report Module
"""
from .models import (
    BranchRecord,
    ChannelInput,
    ChannelName,
    ChannelRecord,
    SalesReport,
    WebsiteInput,
    WebsiteRecord,
)

__all__ = [
    "BranchRecord",
    "ChannelInput",
    "ChannelName",
    "ChannelRecord",
    "SalesReport",
    "WebsiteInput",
    "WebsiteRecord",
]
