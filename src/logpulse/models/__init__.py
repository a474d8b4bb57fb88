"""
Pydantic data models package.

Contains all data validation models for:
- The monitored-site configuration tree
- Validation results
- API requests and responses
"""

from .admin import ErrorResponse, ReloadResponse, ValidateRequest
from .configuration import (
    AgentSource,
    Configuration,
    DatabaseConfig,
    HttpSource,
    LocalSource,
    PVFilterConfig,
    S3Source,
    SftpSource,
    Source,
    SourceAuth,
    SourceBase,
    SourceIndex,
    SourceType,
    SystemConfig,
    UnknownSource,
    WebsiteConfig,
)
from .pv import ClassifyRequest, ClassifyResponse, PageViewRecord
from .validation import FieldError, ValidateOptions, ValidationResult

__all__ = [
    # Configuration models
    "Configuration",
    "DatabaseConfig",
    "PVFilterConfig",
    "SystemConfig",
    "WebsiteConfig",

    # Log source variants
    "AgentSource",
    "HttpSource",
    "LocalSource",
    "S3Source",
    "SftpSource",
    "Source",
    "SourceAuth",
    "SourceBase",
    "SourceIndex",
    "SourceType",
    "UnknownSource",

    # Validation models
    "FieldError",
    "ValidateOptions",
    "ValidationResult",

    # API models
    "ClassifyRequest",
    "ErrorResponse",
    "ClassifyResponse",
    "PageViewRecord",
    "ReloadResponse",
    "ValidateRequest",
]
