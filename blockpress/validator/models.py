"""Validator result models. Dumped with camelCase aliases (`isValid`, `fixedData`)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Issue(_CamelModel):
    message: str
    context: str = ""


class ValidationResult(_CamelModel):
    is_valid: bool
    errors: list[Issue] = Field(default_factory=list)
    fixes: list[Issue] = Field(default_factory=list)
    fixed_data: Any = None


class StructureValidation(_CamelModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class ValidationSummary(_CamelModel):
    total_errors: int
    total_fixes: int
    is_fully_valid: bool


class ValidationReport(ValidationResult):
    structure_validation: StructureValidation
    summary: ValidationSummary
