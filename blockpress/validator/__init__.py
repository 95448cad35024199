"""Block schema validation and repair."""

from blockpress.validator.core import BlockValidator, validate_and_fix, validate_and_fix_json
from blockpress.validator.models import Issue, ValidationReport, ValidationResult

__all__ = [
    "BlockValidator",
    "validate_and_fix",
    "validate_and_fix_json",
    "Issue",
    "ValidationReport",
    "ValidationResult",
]
