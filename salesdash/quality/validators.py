"""
Report Validation Module

Rule-based validation pass run on every report before it reaches the store.

Checks:
- Channel average order values match their leaves
- Branch totals and averages match their channels
- Website rates and average match its leaves
- Website order balance (completed + cancelled <= total)
- Website visits recorded when orders exist
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from salesdash.config import Settings, get_settings
from salesdash.reports.models import SalesReport
from salesdash.transformation.aggregation import recompute_branch, recompute_website_edit

logger = structlog.get_logger(__name__)

# A rule answers (passed, message, details) for one report
Rule = Callable[[SalesReport], Tuple[bool, str, Optional[Dict[str, Any]]]]


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # blocks the save
    WARNING = "warning"  # logged, save continues
    INFO = "info"


class ValidationStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"  # warnings only


class ReportValidationError(ValueError):
    """Raised when a report fails an error-level check"""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        names = ", ".join(c.name for c in result.failures)
        super().__init__(f"Report failed validation: {names}")


@dataclass
class ValidationCheck:
    """Outcome of one rule"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass
class ValidationResult:
    """
    Outcome of a full validation pass over one report.

    Every check lands in exactly one bucket: passed, failed (ERROR), warning
    or info, so the four counts add up to total_checks.
    """
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    info_count: int = 0
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        return 100.0 * self.passed_checks / self.total_checks if self.total_checks else 100.0

    @property
    def failures(self) -> List[ValidationCheck]:
        """Failed checks above INFO severity"""
        return [c for c in self.checks if not c.passed and c.severity != ValidationSeverity.INFO]

    def raise_for_errors(self) -> None:
        if self.status == ValidationStatus.FAILED:
            raise ReportValidationError(self)


class ReportValidator:
    """
    Validator for SalesReport invariants.

    Rules are registered through the add_* builders and run in order:

        result = (
            ReportValidator()
            .add_derived_fields_check()
            .add_website_order_balance_check()
            .validate(report)
        )
    """

    def __init__(self, tolerance: float = 1e-6, strict_mode: bool = False):
        self.tolerance = tolerance
        self.strict_mode = strict_mode  # warnings fail the report too
        self._rules: List[Tuple[str, ValidationSeverity, Rule]] = []

    def _register(self, name: str, severity: ValidationSeverity, rule: Rule) -> "ReportValidator":
        self._rules.append((name, severity, rule))
        return self

    def _close(self, actual: float, expected: float) -> bool:
        return math.isclose(actual, expected, rel_tol=1e-9, abs_tol=self.tolerance)

    def add_derived_fields_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "ReportValidator":
        """Every channel average and branch total must match a recompute"""
        def rule(report: SalesReport):
            stale: List[str] = []
            for branch in report.branches:
                fresh = recompute_branch(branch)
                stale.extend(
                    f"{branch.name}/{old.name.value}.avgOrderValue"
                    for old, new in zip(branch.channels, fresh.channels)
                    if not self._close(old.avg_order_value, new.avg_order_value)
                )
                stale.extend(
                    f"{branch.name}.{attr}"
                    for attr in ("total_sales", "total_orders", "avg_order_value")
                    if not self._close(getattr(branch, attr), getattr(fresh, attr))
                )
            if stale:
                return False, f"{len(stale)} stale derived fields", {"mismatches": stale}
            return True, "Branch derived fields are consistent", {"mismatches": []}

        return self._register("branch_derived_fields", severity, rule)

    def add_website_derived_fields_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "ReportValidator":
        """Website rates and average must match its leaves"""
        def rule(report: SalesReport):
            website = report.website
            fresh = recompute_website_edit(website)
            stale = [
                attr for attr in ("conversion_rate", "cancellation_rate", "avg_order_value")
                if not self._close(getattr(website, attr), getattr(fresh, attr))
            ]
            if stale:
                return False, f"Stale website fields: {', '.join(stale)}", {"mismatches": stale}
            return True, "Website derived fields are consistent", {"mismatches": []}

        return self._register("website_derived_fields", severity, rule)

    def add_website_order_balance_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "ReportValidator":
        """Completed plus cancelled website orders must not exceed total orders"""
        def rule(report: SalesReport):
            w = report.website
            accounted = w.completed_orders + w.cancelled_orders
            details = {"accounted_orders": accounted, "total_orders": w.total_orders}
            if accounted > w.total_orders:
                return False, (
                    f"Completed ({w.completed_orders}) + cancelled ({w.cancelled_orders}) "
                    f"exceed total orders ({w.total_orders})"
                ), details
            return True, "Website orders balance", details

        return self._register("website_order_balance", severity, rule)

    def add_website_visits_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.INFO,
    ) -> "ReportValidator":
        def rule(report: SalesReport):
            w = report.website
            if w.total_orders > 0 and w.visits == 0:
                return False, "Website has orders but no visits; conversion rate reads 0", None
            return True, "Website visits recorded", None

        return self._register("website_visits_recorded", severity, rule)

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[SalesReport], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "ReportValidator":
        """Add a named predicate over the whole report"""
        def rule(report: SalesReport):
            if check_func(report):
                return True, f"Check '{name}' passed", None
            return False, message_on_fail, None

        return self._register(name, severity, rule)

    def validate(self, report: SalesReport) -> ValidationResult:
        """
        Run every registered rule against a report.

        Errors make the result FAILED, warnings make it PARTIAL (FAILED in
        strict mode) and INFO failures are recorded without affecting it.
        """
        started_at = datetime.now(timezone.utc)

        checks = []
        for name, severity, rule in self._rules:
            passed, message, details = rule(report)
            checks.append(ValidationCheck(name, passed, severity, message, details))
            if not passed and severity != ValidationSeverity.INFO:
                logger.warning("Validation check failed", check=name, severity=severity.value, detail=message)

        failed = [c for c in checks if not c.passed]
        errors = sum(c.severity == ValidationSeverity.ERROR for c in failed)
        warnings = sum(c.severity == ValidationSeverity.WARNING for c in failed)

        if errors or (warnings and self.strict_mode):
            status = ValidationStatus.FAILED
        elif warnings:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        logger.info(
            "Report validated",
            status=status.value,
            checks=len(checks),
            errors=errors,
            warnings=warnings,
        )

        return ValidationResult(
            status=status,
            total_checks=len(checks),
            passed_checks=len(checks) - len(failed),
            failed_checks=errors,
            warning_count=warnings,
            info_count=len(failed) - errors - warnings,
            checks=checks,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )


def create_report_validator(settings: Optional[Settings] = None) -> ReportValidator:
    """Create the validator used before every save"""
    quality = (settings or get_settings()).quality
    balance_severity = (
        ValidationSeverity.ERROR if quality.enforce_website_order_balance else ValidationSeverity.WARNING
    )

    return (
        ReportValidator(tolerance=quality.tolerance)
        .add_derived_fields_check()
        .add_website_derived_fields_check()
        .add_website_order_balance_check(severity=balance_severity)
        .add_website_visits_check()
    )
