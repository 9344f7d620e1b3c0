"""
Serving Layer Module
"""
from .store import MemoryReportStore, RedisReportStore, ReportStore, create_store

__all__ = [
    "MemoryReportStore",
    "RedisReportStore",
    "ReportStore",
    "create_store",
]
