"""
Document Ingestion Pipeline

extract text -> tokenize -> positional decode -> validation pass -> store

Extraction and decoding run as one blocking call in a worker thread. The
store is written only after every step succeeded; a failed ingestion
leaves the stored report untouched.
"""

import time
from dataclasses import dataclass
from typing import Optional

import structlog
from starlette.concurrency import run_in_threadpool

from salesdash.config import get_settings
from salesdash.ingestion.decoder import DecodingSchema, decode_report, get_schema
from salesdash.ingestion.extractor import extract_text
from salesdash.quality.validators import ReportValidator, ValidationResult, create_report_validator
from salesdash.reports.models import SalesReport
from salesdash.serving.store import ReportStore

logger = structlog.get_logger(__name__)


@dataclass
class IngestionResult:
    """Outcome of a successful ingestion"""
    report: SalesReport
    schema_version: str
    validation: Optional[ValidationResult]
    duration_seconds: float
    source_name: Optional[str] = None


def decode_document(document: bytes, schema: Optional[DecodingSchema] = None) -> SalesReport:
    """
    Extract and decode a document.

    Raises:
        ExtractionError: If the document cannot be read
        ParseError: If it holds too little numeric data
    """
    return decode_report(extract_text(document), schema)


async def ingest_document(
    document: bytes,
    store: ReportStore,
    schema: Optional[DecodingSchema] = None,
    validator: Optional[ReportValidator] = None,
    source_name: Optional[str] = None,
) -> IngestionResult:
    """
    Decode a document and replace the stored report with it.

    Args:
        document: Raw document bytes
        store: Report store to write on success
        schema: Decoding schema (configured schema when omitted)
        validator: Validation pass to run before saving; None skips it
        source_name: Original filename, for logging

    Returns:
        IngestionResult describing the saved report

    Raises:
        ExtractionError, ParseError, ReportValidationError: store untouched
    """
    started = time.perf_counter()
    schema = schema or get_schema()
    log = logger.bind(source=source_name, schema_version=schema.version)

    log.info("Starting document ingestion", size=len(document))

    try:
        report = await run_in_threadpool(decode_document, document, schema)

        validation = None
        if validator is not None:
            validation = validator.validate(report)
            validation.raise_for_errors()
    except Exception as e:
        log.warning("Document ingestion failed", error_type=type(e).__name__, error=str(e))
        raise

    await store.save(report)

    duration = time.perf_counter() - started
    log.info("Document ingested", branches=len(report.branches), duration_seconds=round(duration, 3))

    return IngestionResult(
        report=report,
        schema_version=schema.version,
        validation=validation,
        duration_seconds=duration,
        source_name=source_name,
    )


def default_validator() -> Optional[ReportValidator]:
    """Configured validation pass, or None when disabled"""
    settings = get_settings()
    return create_report_validator(settings) if settings.quality.enable_validation else None
