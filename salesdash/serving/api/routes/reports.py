"""
Report API Endpoints

Read, edit, upload and reset the live sales report. Every edit goes through
the aggregation engine so the saved report is always consistent.
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from salesdash.config import get_settings
from salesdash.ingestion.decoder import DecodingSchema
from salesdash.ingestion.pipeline import default_validator, ingest_document
from salesdash.quality.validators import ValidationSeverity
from salesdash.reports.models import ChannelInput, ChannelName, SalesReport, WebsiteInput
from salesdash.serving.api.dependencies import get_decoding_schema, get_store
from salesdash.serving.store import ReportStore
from salesdash.transformation.aggregation import (
    aggregate_totals,
    apply_branch_edit,
    apply_website_edit,
    branch_breakdown,
    channel_cancellations,
    channel_distribution,
    recompute_report,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChannelShare(ApiModel):
    """One slice of the channel distribution"""
    name: str
    label: str
    value: float
    percentage: float


class BranchSales(ApiModel):
    name: str
    sales: float
    orders: int


class ReportSummary(ApiModel):
    """Headline metrics for the overview page"""
    total_sales: float
    total_orders: int
    avg_order_value: float
    conversion_rate: float
    channel_distribution: List[ChannelShare]
    branches: List[BranchSales]


class BranchLoss(ApiModel):
    branch: str
    cancelled_orders: int
    cancelled_value: float


class CancellationPanel(ApiModel):
    channel: str
    label: str
    cancelled_orders: int
    cancelled_value: float
    branches: List[BranchLoss]


class UploadResponse(ApiModel):
    """Result of a document upload"""
    message: str
    schema_version: str
    validation_status: Optional[str]
    warnings: List[str]
    report: SalesReport


# =============================================================================
# HELPERS
# =============================================================================

async def _validate_and_save(store: ReportStore, report: SalesReport) -> SalesReport:
    validator = default_validator()
    if validator is not None:
        validator.validate(report).raise_for_errors()
    await store.save(report)
    return report


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=SalesReport)
async def get_report(store: ReportStore = Depends(get_store)) -> SalesReport:
    """Current report, or the default dataset when nothing is stored."""
    return await store.current()


@router.put("", response_model=SalesReport)
async def replace_report(
    report: SalesReport,
    store: ReportStore = Depends(get_store),
) -> SalesReport:
    """Replace the whole report; derived fields in the body are recomputed."""
    if not report.branches:
        raise HTTPException(status_code=422, detail="Report must contain at least one branch")
    logger.info("Replacing report", branches=len(report.branches))
    return await _validate_and_save(store, recompute_report(report))


@router.get("/summary", response_model=ReportSummary)
async def get_summary(store: ReportStore = Depends(get_store)) -> ReportSummary:
    """Report-wide totals, channel distribution and per-branch breakdown."""
    report = await store.current()
    totals = aggregate_totals(report)

    shares = [
        ChannelShare(
            name=name,
            label=ChannelName(name).display_label,
            value=value,
            percentage=(value / totals.total_sales) * 100 if totals.total_sales > 0 else 0.0,
        )
        for name, value in channel_distribution(report).items()
    ]

    return ReportSummary(
        total_sales=totals.total_sales,
        total_orders=totals.total_orders,
        avg_order_value=totals.avg_order_value,
        conversion_rate=report.website.conversion_rate,
        channel_distribution=shares,
        branches=[BranchSales(name=b.name, sales=b.sales, orders=b.orders) for b in branch_breakdown(report)],
    )


@router.get("/cancellations/{channel}", response_model=CancellationPanel)
async def get_cancellations(
    channel: ChannelName,
    store: ReportStore = Depends(get_store),
) -> CancellationPanel:
    """Cancellation losses of one channel across branches."""
    report = await store.current()
    losses = channel_cancellations(report, channel)

    return CancellationPanel(
        channel=losses.channel.value,
        label=losses.channel.display_label,
        cancelled_orders=losses.cancelled_orders,
        cancelled_value=losses.cancelled_value,
        branches=[
            BranchLoss(branch=row.branch, cancelled_orders=row.cancelled_orders, cancelled_value=row.cancelled_value)
            for row in losses.branches
        ],
    )


@router.put("/branches/{branch_index}/channels/{channel_index}", response_model=SalesReport)
async def update_channel(
    branch_index: int,
    channel_index: int,
    channel: ChannelInput,
    store: ReportStore = Depends(get_store),
) -> SalesReport:
    """Edit one channel's leaf values; the channel and branch are recomputed."""
    report = await store.current()

    try:
        updated = apply_branch_edit(report, branch_index, channel_index, channel)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    slot = report.branches[branch_index].channels[channel_index].name
    if channel.name != slot:
        raise HTTPException(
            status_code=422,
            detail=f"Channel {channel_index} is {slot.value}, not {channel.name.value}",
        )

    logger.info(
        "Channel updated",
        branch_index=branch_index,
        channel_index=channel_index,
        channel=channel.name.value,
    )
    return await _validate_and_save(store, updated)


@router.put("/website", response_model=SalesReport)
async def update_website(
    website: WebsiteInput,
    store: ReportStore = Depends(get_store),
) -> SalesReport:
    """Edit the website leaf values; rates and average are recomputed."""
    report = await store.current()
    updated = apply_website_edit(report, website)
    logger.info("Website updated", visits=website.visits, total_orders=website.total_orders)
    return await _validate_and_save(store, updated)


@router.post("/upload", response_model=UploadResponse)
async def upload_report(
    file: UploadFile = File(...),
    store: ReportStore = Depends(get_store),
    schema: DecodingSchema = Depends(get_decoding_schema),
) -> UploadResponse:
    """Decode an uploaded PDF and make it the live report."""
    settings = get_settings()

    if file.content_type and file.content_type not in ("application/pdf", "application/octet-stream"):
        raise HTTPException(status_code=415, detail="Please upload a PDF file")

    limit = settings.decoder.max_upload_bytes
    if file.size is not None and file.size > limit:
        raise HTTPException(status_code=413, detail="Document too large")

    # bounded read: one byte past the limit is enough to reject
    document = await file.read(limit + 1)
    if len(document) > limit:
        raise HTTPException(status_code=413, detail="Document too large")

    result = await ingest_document(
        document,
        store,
        schema=schema,
        validator=default_validator(),
        source_name=file.filename,
    )

    warnings = []
    if result.validation is not None:
        warnings = [
            c.message for c in result.validation.checks
            if not c.passed and c.severity == ValidationSeverity.WARNING
        ]

    return UploadResponse(
        message=f"Successfully loaded data from {file.filename}",
        schema_version=result.schema_version,
        validation_status=result.validation.status.value if result.validation else None,
        warnings=warnings,
        report=result.report,
    )


@router.post("/reset", response_model=SalesReport)
async def reset_report(store: ReportStore = Depends(get_store)) -> SalesReport:
    """Restore the default dataset."""
    return await store.reset()
