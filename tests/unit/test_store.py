"""
Unit Tests - Report Store
"""
import json

import pytest

from salesdash.reports.defaults import default_report
from salesdash.serving.store import MemoryReportStore, parse_stored_report


class TestParseStoredReport:
    """Tests for parse_stored_report"""

    def test_round_trip(self, sample_report):
        payload = json.dumps(sample_report.to_payload())
        assert parse_stored_report(payload) == sample_report

    def test_payload_uses_camel_case(self, sample_report):
        payload = sample_report.to_payload()

        branch = payload["branches"][0]
        assert set(branch) == {"name", "localizedName", "channels", "totalSales", "totalOrders", "avgOrderValue"}
        assert set(branch["channels"][0]) == {
            "name", "sales", "orders", "avgOrderValue", "cancelledOrders", "cancelledValue",
        }
        assert "conversionRate" in payload["website"]
        assert branch["channels"][0]["name"] == "Call Centre"

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "not json",
            "[]",
            json.dumps({"website": {}}),
            json.dumps({"branches": [], "website": {"visits": 1}}),
            json.dumps({"branches": [{"name": "A", "channels": []}]}),
            json.dumps({"branches": "nope", "website": {"visits": 1}}),
        ],
    )
    def test_invalid_payloads_read_as_absent(self, raw):
        assert parse_stored_report(raw) is None

    def test_schema_violation_reads_as_absent(self, sample_report):
        payload = sample_report.to_payload()
        payload["branches"][0]["channels"][0]["orders"] = -3
        assert parse_stored_report(json.dumps(payload)) is None

    def test_stale_derived_fields_are_recomputed(self, sample_report):
        payload = sample_report.to_payload()
        payload["branches"][0]["totalSales"] = 1
        payload["branches"][0]["channels"][1]["avgOrderValue"] = 0
        payload["website"]["conversionRate"] = 42

        assert parse_stored_report(json.dumps(payload)) == sample_report

    def test_legacy_arabic_name(self, sample_report):
        payload = sample_report.to_payload()
        for branch in payload["branches"]:
            branch["arabicName"] = branch.pop("localizedName")

        report = parse_stored_report(payload)
        assert report.branches[0].localized_name == "المعادي"


class TestMemoryReportStore:
    """Tests for MemoryReportStore"""

    @pytest.mark.asyncio
    async def test_empty_store_serves_default(self, memory_store):
        assert await memory_store.load() is None
        assert await memory_store.current() == default_report()

    @pytest.mark.asyncio
    async def test_save_and_load(self, memory_store, sample_report):
        await memory_store.save(sample_report)

        assert await memory_store.load() == sample_report
        assert json.loads(memory_store.raw)["branches"][0]["name"] == "Maadi"

    @pytest.mark.asyncio
    async def test_reset(self, sample_report):
        store = MemoryReportStore(initial=sample_report)

        restored = await store.reset()

        assert restored == default_report()
        assert store.raw is None
        assert await store.current() == default_report()

    @pytest.mark.asyncio
    async def test_ping(self, memory_store):
        assert await memory_store.ping() is True
