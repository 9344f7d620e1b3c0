"""
Positional Report Decoder

Reconstructs a SalesReport from the flat number sequence of an extracted
document using a fixed, versioned decoding schema:

    for each branch, for each channel:   sales, orders
    then the website block:              visits, totalSales, totalOrders,
                                         completedOrders, cancelledOrders,
                                         cancelledValue

Decoding is lenient: a read past the end of the sequence yields 0. The only
rejection is the minimum-token guard, which stops unrelated documents from
turning into an all-zero report. Any deviation in the number of emitted
tokens shifts every field after it, so token count mismatches are logged.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from salesdash.config import Settings, get_settings
from salesdash.ingestion.tokenizer import tokenize
from salesdash.reports.models import ChannelInput, ChannelName, SalesReport, WebsiteInput
from salesdash.transformation.aggregation import build_branch, recompute_website_edit

logger = structlog.get_logger(__name__)

CHANNEL_FIELDS: Tuple[str, ...] = ("sales", "orders")
WEBSITE_FIELDS: Tuple[str, ...] = (
    "visits",
    "total_sales",
    "total_orders",
    "completed_orders",
    "cancelled_orders",
    "cancelled_value",
)
_WEBSITE_COUNT_FIELDS = frozenset({"visits", "total_orders", "completed_orders", "cancelled_orders"})

DEFAULT_MIN_TOKENS = 10


class ParseError(ValueError):
    """Raised when a document does not carry usable numeric data to decode"""

    def __init__(self, token_count: int, min_tokens: int, reason: Optional[str] = None):
        self.token_count = token_count
        self.min_tokens = min_tokens
        super().__init__(
            reason
            or f"insufficient numeric data: found {token_count} numbers, need at least {min_tokens}"
        )


class BranchSpec(BaseModel):
    """Display identifiers of one branch slot in the schema"""

    model_config = ConfigDict(frozen=True)

    name: str
    localized_name: str = ""


class DecodingSchema(BaseModel):
    """Positional contract between the document producer and the decoder"""

    model_config = ConfigDict(frozen=True)

    version: str
    branches: List[BranchSpec]
    channels: List[ChannelName] = Field(
        default_factory=lambda: [ChannelName.CALL_CENTRE, ChannelName.INSTASHOP, ChannelName.TALABAT]
    )
    min_tokens: int = Field(default=DEFAULT_MIN_TOKENS, ge=0)

    @property
    def expected_tokens(self) -> int:
        """Number of tokens a well-formed document emits"""
        return len(self.branches) * len(self.channels) * len(CHANNEL_FIELDS) + len(WEBSITE_FIELDS)

    def with_branch_names(
        self,
        names: Optional[Sequence[str]] = None,
        localized_names: Optional[Sequence[str]] = None,
    ) -> "DecodingSchema":
        """Copy of the schema with branch display names replaced"""
        branches = list(self.branches)
        for label, values in (("branch_names", names), ("localized_names", localized_names)):
            if values is not None and len(values) != len(branches):
                raise ValueError(
                    f"{label} has {len(values)} entries, schema {self.version} "
                    f"has {len(branches)} branches"
                )

        branches = [
            BranchSpec(
                name=names[i] if names is not None else spec.name,
                localized_name=localized_names[i] if localized_names is not None else spec.localized_name,
            )
            for i, spec in enumerate(branches)
        ]
        return self.model_copy(update={"branches": branches})


# Branch naming used by the exported sales documents
PDF_SCHEMA_V1 = DecodingSchema(
    version="pdf-v1",
    branches=[
        BranchSpec(name="Madinaty", localized_name="مدينتي"),
        BranchSpec(name="New Cairo 5th", localized_name="التجمع الخامس"),
        BranchSpec(name="Zahraa El Maadi", localized_name="زهراء المعادي"),
        BranchSpec(name="Downtown", localized_name="وسط البلد"),
    ],
)

# Branch naming used by the live dashboard dataset
DASHBOARD_SCHEMA_V1 = DecodingSchema(
    version="dashboard-v1",
    branches=[
        BranchSpec(name="Maadi", localized_name="المعادي"),
        BranchSpec(name="Heliopolis", localized_name="مصر الجديدة"),
        BranchSpec(name="Tagamoa", localized_name="التجمع"),
        BranchSpec(name="Dark", localized_name="Dark Store"),
    ],
)

SCHEMAS: Dict[str, DecodingSchema] = {
    schema.version: schema for schema in (PDF_SCHEMA_V1, DASHBOARD_SCHEMA_V1)
}


def get_schema(settings: Optional[Settings] = None) -> DecodingSchema:
    """
    Resolve the active decoding schema from configuration.

    Raises:
        KeyError: If the configured version is not registered
        ValueError: If a branch name override does not match the branch count
    """
    settings = settings or get_settings()
    decoder = settings.decoder

    try:
        schema = SCHEMAS[decoder.schema_version]
    except KeyError:
        raise KeyError(
            f"Unknown decoding schema '{decoder.schema_version}', "
            f"expected one of: {sorted(SCHEMAS)}"
        ) from None

    schema = schema.with_branch_names(decoder.branch_names, decoder.localized_names)
    return schema.model_copy(update={"min_tokens": decoder.min_tokens})


class _TokenCursor:
    """Single forward read cursor; exhausted reads return 0"""

    def __init__(self, tokens: Sequence[float]):
        self._tokens = tokens
        self.position = 0

    def take(self) -> float:
        value = self._tokens[self.position] if self.position < len(self._tokens) else 0.0
        self.position += 1
        return value

    def take_count(self) -> int:
        # counts are whole numbers; a stray fraction is truncated
        return int(self.take())


def decode_tokens(tokens: Sequence[float], schema: DecodingSchema) -> SalesReport:
    """
    Map a token sequence onto the schema.

    Args:
        tokens: Numbers in document order
        schema: Decoding schema

    Returns:
        Structurally complete report with derived fields computed

    Raises:
        ParseError: If fewer than schema.min_tokens tokens are supplied, or a
            token the schema reads is out of the float range
    """
    if len(tokens) < schema.min_tokens:
        raise ParseError(len(tokens), schema.min_tokens)

    # digit runs past the float range parse to inf; surplus tokens are never read
    oversized = [i for i, value in enumerate(tokens[:schema.expected_tokens]) if not math.isfinite(value)]
    if oversized:
        raise ParseError(
            len(tokens),
            schema.min_tokens,
            reason=f"unreadable numeric data: token {oversized[0]} is out of range",
        )

    if len(tokens) != schema.expected_tokens:
        logger.warning(
            "Token count does not match decoding schema",
            schema_version=schema.version,
            token_count=len(tokens),
            expected_tokens=schema.expected_tokens,
        )

    cursor = _TokenCursor(tokens)

    branches = []
    for spec in schema.branches:
        channels = []
        for channel_name in schema.channels:
            sales = cursor.take()
            orders = cursor.take_count()
            channels.append(ChannelInput(name=channel_name, sales=sales, orders=orders))
        branches.append(build_branch(spec.name, spec.localized_name, channels))

    website_fields = {
        name: cursor.take_count() if name in _WEBSITE_COUNT_FIELDS else cursor.take()
        for name in WEBSITE_FIELDS
    }
    website = recompute_website_edit(WebsiteInput(**website_fields))

    return SalesReport(branches=branches, website=website)


def decode_report(raw_text: str, schema: Optional[DecodingSchema] = None) -> SalesReport:
    """
    Decode extracted document text into a SalesReport.

    Deterministic: the same text and schema always produce the same report.

    Raises:
        ParseError: If the text holds fewer numbers than schema.min_tokens
    """
    schema = schema or get_schema()
    tokens = tokenize(raw_text)

    logger.info(
        "Decoding report",
        schema_version=schema.version,
        token_count=len(tokens),
        expected_tokens=schema.expected_tokens,
    )

    return decode_tokens(tokens, schema)
