"""
Document Ingestion Module
"""
from .decoder import (
    DASHBOARD_SCHEMA_V1,
    PDF_SCHEMA_V1,
    SCHEMAS,
    BranchSpec,
    DecodingSchema,
    ParseError,
    decode_report,
    decode_tokens,
    get_schema,
)
from .extractor import ExtractionError, extract_text
from .tokenizer import tokenize

__all__ = [
    "DASHBOARD_SCHEMA_V1",
    "PDF_SCHEMA_V1",
    "SCHEMAS",
    "BranchSpec",
    "DecodingSchema",
    "ExtractionError",
    "ParseError",
    "decode_report",
    "decode_tokens",
    "extract_text",
    "get_schema",
    "tokenize",
]
