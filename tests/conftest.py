"""
Test Suite Configuration
"""
from typing import Callable, List

import pytest

from salesdash.ingestion.decoder import BranchSpec, DecodingSchema, PDF_SCHEMA_V1
from salesdash.reports.models import ChannelInput, ChannelName, SalesReport, WebsiteInput
from salesdash.serving.store import MemoryReportStore
from salesdash.transformation.aggregation import build_branch, recompute_website_edit

# 4 branches x 3 channels x (sales, orders) followed by the website block
SCENARIO_TOKENS = [
    100, 2, 50, 1, 30, 1,
    100, 2, 50, 1, 30, 1,
    100, 2, 50, 1, 30, 1,
    100, 2, 50, 1, 30, 1,
    1000, 500, 10, 8, 2, 50,
]


def _build_pdf(lines: List[str]) -> bytes:
    """Single-page PDF showing each line in Helvetica"""
    content = ["BT", "/F1 12 Tf", "16 TL", "72 760 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        content.append(f"({escaped}) Tj T*")
    content.append("ET")
    stream = "\n".join(content).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def scenario_tokens() -> List[int]:
    return list(SCENARIO_TOKENS)


@pytest.fixture
def scenario_text() -> str:
    """Extracted text of a well-formed report (labels carry no digits)"""
    rows = [SCENARIO_TOKENS[i:i + 6] for i in range(0, 24, 6)]
    lines = ["Daily Sales Report"]
    for row in rows:
        lines.append(
            "Branch  Call Centre {} EGP / {} orders  Insta {} EGP / {} orders  Talabat {} EGP / {} orders".format(*row)
        )
    lines.append("Website visits {} sales {} orders {} completed {} cancelled {} lost {}".format(*SCENARIO_TOKENS[24:]))
    return "\n".join(lines)


@pytest.fixture
def pdf_factory() -> Callable[[List[str]], bytes]:
    return _build_pdf


@pytest.fixture
def scenario_pdf(pdf_factory) -> bytes:
    lines = [" ".join(str(t) for t in SCENARIO_TOKENS[i:i + 6]) for i in range(0, len(SCENARIO_TOKENS), 6)]
    return pdf_factory(["Sales Report"] + lines)


@pytest.fixture
def pdf_schema() -> DecodingSchema:
    return PDF_SCHEMA_V1


@pytest.fixture
def two_branch_schema() -> DecodingSchema:
    """Smaller schema version with two channels per branch"""
    return DecodingSchema(
        version="test-v2",
        branches=[BranchSpec(name="North"), BranchSpec(name="South")],
        channels=[ChannelName.CALL_CENTRE, ChannelName.TALABAT],
        min_tokens=4,
    )


@pytest.fixture
def sample_report() -> SalesReport:
    """Two-branch report with cancellations on the delivery channels"""
    branches = [
        build_branch("Maadi", "المعادي", [
            ChannelInput(name=ChannelName.CALL_CENTRE, sales=1000.0, orders=4),
            ChannelInput(name=ChannelName.INSTASHOP, sales=600.0, orders=3, cancelled_orders=1, cancelled_value=150.0),
            ChannelInput(name=ChannelName.TALABAT, sales=900.0, orders=6, cancelled_orders=2, cancelled_value=240.0),
        ]),
        build_branch("Heliopolis", "مصر الجديدة", [
            ChannelInput(name=ChannelName.CALL_CENTRE, sales=500.0, orders=2),
            ChannelInput(name=ChannelName.INSTASHOP, sales=400.0, orders=2),
            ChannelInput(name=ChannelName.TALABAT, sales=300.0, orders=0, cancelled_orders=1, cancelled_value=75.5),
        ]),
    ]
    website = recompute_website_edit(
        WebsiteInput(
            visits=2000,
            total_orders=40,
            completed_orders=35,
            cancelled_orders=5,
            total_sales=8000.0,
            cancelled_value=900.0,
        )
    )
    return SalesReport(branches=branches, website=website)


@pytest.fixture
def memory_store() -> MemoryReportStore:
    return MemoryReportStore()
