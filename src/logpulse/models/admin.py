"""
Admin API data models.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .validation import ValidationResult


class ValidateRequest(BaseModel):
    """Request model for ad-hoc configuration validation."""

    config: Dict[str, Any] = Field(..., description="Configuration tree as it would appear in config.yaml")
    check_paths: bool = Field(default=False, description="Check local paths on this host")
    check_remote: bool = Field(default=False, description="Check remote source paths")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReloadResponse(BaseModel):
    """Response model for a configuration reload."""

    message: str = Field(..., description="Outcome message")
    validation: ValidationResult = Field(..., description="Validation result of the new configuration")
    filter_rules: Dict[str, int] = Field(..., description="Rule counts of the published PV filter")


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error details"
    )
