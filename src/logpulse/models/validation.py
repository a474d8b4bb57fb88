"""
Validation result models.

A ValidationResult is built once per validation call and is frozen
afterwards; errors block startup, warnings are advisory.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldError(BaseModel):
    """A problem attached to a dotted configuration path."""

    field: str = Field(description="Dotted path, e.g. websites[0].sources[1].id")
    message: str = Field(description="Human-readable description")

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """Every error and warning found in one validation pass, in check order."""

    errors: Tuple[FieldError, ...] = ()
    warnings: Tuple[FieldError, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_fields(self) -> Tuple[str, ...]:
        return tuple(e.field for e in self.errors)

    def warning_fields(self) -> Tuple[str, ...]:
        return tuple(w.field for w in self.warnings)


class ValidateOptions(BaseModel):
    """Optional, slower checks."""

    check_paths: bool = Field(default=False, description="Check local paths on the filesystem")
    check_remote: bool = Field(default=False, description="Check remote source paths")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
