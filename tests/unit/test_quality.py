"""
Unit Tests - Report Validation
"""
import pytest

from salesdash.config import Settings
from salesdash.quality.validators import (
    ReportValidationError,
    ReportValidator,
    ValidationSeverity,
    ValidationStatus,
    create_report_validator,
)
from salesdash.reports.models import WebsiteInput
from salesdash.transformation.aggregation import recompute_website_edit


class TestReportValidator:
    """Tests for ReportValidator"""

    def test_consistent_report_passes(self, sample_report):
        validator = ReportValidator().add_derived_fields_check().add_website_derived_fields_check()

        result = validator.validate(sample_report)

        assert result.status == ValidationStatus.PASSED
        assert result.passed_checks == 2
        assert result.success_rate == 100.0

    def test_stale_branch_total_fails(self, sample_report):
        branches = list(sample_report.branches)
        branches[1] = branches[1].model_copy(update={"total_sales": 1.0})
        report = sample_report.model_copy(update={"branches": branches})

        result = ReportValidator().add_derived_fields_check().validate(report)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].details["mismatches"] == ["Heliopolis.total_sales"]

    def test_stale_channel_average_fails(self, sample_report):
        branch = sample_report.branches[0]
        channels = list(branch.channels)
        channels[0] = channels[0].model_copy(update={"avg_order_value": 1.0})
        branches = [branch.model_copy(update={"channels": channels})] + list(sample_report.branches[1:])
        report = sample_report.model_copy(update={"branches": branches})

        result = ReportValidator().add_derived_fields_check().validate(report)

        assert result.failed_checks == 1
        assert "Maadi/Call Centre.avgOrderValue" in result.checks[0].details["mismatches"]

    def test_stale_website_rate_fails(self, sample_report):
        website = sample_report.website.model_copy(update={"cancellation_rate": 99.0})
        report = sample_report.model_copy(update={"website": website})

        result = ReportValidator().add_website_derived_fields_check().validate(report)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].details["mismatches"] == ["cancellation_rate"]

    def test_order_balance_warning(self, sample_report):
        website = recompute_website_edit(WebsiteInput(visits=100, total_orders=10, completed_orders=9, cancelled_orders=3))
        report = sample_report.model_copy(update={"website": website})

        result = ReportValidator().add_website_order_balance_check().validate(report)

        assert result.status == ValidationStatus.PARTIAL
        assert result.warning_count == 1
        assert result.failed_checks == 0
        result.raise_for_errors()

    def test_order_balance_enforced(self, sample_report):
        website = recompute_website_edit(WebsiteInput(visits=100, total_orders=10, completed_orders=9, cancelled_orders=3))
        report = sample_report.model_copy(update={"website": website})

        result = (
            ReportValidator()
            .add_website_order_balance_check(severity=ValidationSeverity.ERROR)
            .validate(report)
        )

        with pytest.raises(ReportValidationError) as exc_info:
            result.raise_for_errors()
        assert "website_order_balance" in str(exc_info.value)

    def test_strict_mode_fails_on_warning(self, sample_report):
        website = recompute_website_edit(WebsiteInput(total_orders=1, completed_orders=1, cancelled_orders=1))
        report = sample_report.model_copy(update={"website": website})

        result = ReportValidator(strict_mode=True).add_website_order_balance_check().validate(report)

        assert result.status == ValidationStatus.FAILED
        assert result.failed_checks == 0
        assert result.warning_count == 1
        with pytest.raises(ReportValidationError):
            result.raise_for_errors()

    def test_visits_check_is_informational(self, sample_report):
        website = recompute_website_edit(WebsiteInput(visits=0, total_orders=5, completed_orders=5))
        report = sample_report.model_copy(update={"website": website})

        result = ReportValidator().add_website_visits_check().validate(report)

        assert not result.checks[0].passed
        assert result.status == ValidationStatus.PASSED

    def test_counts_add_up_with_info_failure(self, sample_report):
        website = recompute_website_edit(WebsiteInput(visits=0, total_orders=5, completed_orders=5, cancelled_orders=1))
        report = sample_report.model_copy(update={"website": website})

        result = create_report_validator(Settings()).validate(report)

        assert result.passed_checks == 2
        assert result.warning_count == 1
        assert result.info_count == 1
        assert result.failed_checks == 0
        total = result.passed_checks + result.failed_checks + result.warning_count + result.info_count
        assert total == result.total_checks == 4
        assert result.status == ValidationStatus.PARTIAL

    def test_custom_check(self, sample_report):
        validator = ReportValidator().add_custom_check(
            name="has_four_branches",
            check_func=lambda report: len(report.branches) == 4,
            message_on_fail="Expected four branches",
        )

        result = validator.validate(sample_report)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].message == "Expected four branches"


class TestCreateReportValidator:
    """Tests for the configured validator"""

    def test_default_checks(self, sample_report):
        result = create_report_validator(Settings()).validate(sample_report)

        assert result.total_checks == 4
        assert result.status == ValidationStatus.PASSED

    def test_enforced_balance_from_settings(self, sample_report):
        settings = Settings(quality={"enforce_website_order_balance": True})
        website = recompute_website_edit(WebsiteInput(visits=10, total_orders=2, completed_orders=2, cancelled_orders=1))
        report = sample_report.model_copy(update={"website": website})

        result = create_report_validator(settings).validate(report)

        assert result.status == ValidationStatus.FAILED
