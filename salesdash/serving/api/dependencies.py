"""
API Dependencies
"""

from fastapi import Request

from salesdash.ingestion.decoder import DecodingSchema, get_schema
from salesdash.serving.store import ReportStore


def get_store(request: Request) -> ReportStore:
    """Report store created during application startup"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Report store not initialized")
    return store


def get_decoding_schema() -> DecodingSchema:
    return get_schema()
