"""
Report Quality Module
"""
from .validators import (
    ReportValidationError,
    ReportValidator,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    create_report_validator,
)

__all__ = [
    "ReportValidationError",
    "ReportValidator",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "create_report_validator",
]
