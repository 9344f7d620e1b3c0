"""
API Error Handlers

Maps ingestion and validation failures to user-facing JSON responses.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salesdash.ingestion.decoder import ParseError
from salesdash.ingestion.extractor import ExtractionError
from salesdash.quality.validators import ReportValidationError

logger = structlog.get_logger(__name__)


async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
    logger.warning("Document extraction failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=422, content={"error": "extraction_error", "detail": str(exc)})


async def parse_error_handler(request: Request, exc: ParseError) -> JSONResponse:
    logger.warning("Document decoding failed", path=request.url.path, token_count=exc.token_count)
    return JSONResponse(
        status_code=422,
        content={
            "error": "parse_error",
            "detail": str(exc),
            "tokenCount": exc.token_count,
            "minTokens": exc.min_tokens,
        },
    )


async def validation_error_handler(request: Request, exc: ReportValidationError) -> JSONResponse:
    errors = [{"check": c.name, "message": c.message} for c in exc.result.failures]
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "detail": str(exc), "checks": errors},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExtractionError, extraction_error_handler)
    app.add_exception_handler(ParseError, parse_error_handler)
    app.add_exception_handler(ReportValidationError, validation_error_handler)
