"""
Configuration tree models.

Field names are snake_case in Python and camelCase in the YAML file
(``logPath``, ``pvFilter``, ``statusCodeInclude``...). The models only
describe shape; semantic checks live in ``core.validator``.

A website source is one of several variants, selected by its ``type``
(trimmed, case-insensitive). Blank or unknown types parse into
``UnknownSource`` and are reported by the validator instead of failing
the parse.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator
from pydantic.alias_generators import to_camel


class SourceType(str, Enum):
    """Supported log source transports."""

    LOCAL = "local"
    SFTP = "sftp"
    HTTP = "http"
    S3 = "s3"
    AGENT = "agent"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SourceType"]:
        """Case-insensitive lookup; None for blank or unknown values."""
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


class ConfigModel(BaseModel):
    """Base for configuration nodes: camelCase aliases, lenient scalars."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class SourceAuth(ConfigModel):
    key_file: str = ""
    password: str = ""


class SourceIndex(ConfigModel):
    url: str = ""


class SourceBase(ConfigModel):
    """Fields every source carries; ``type`` selects the variant."""

    source_type: ClassVar[Optional[SourceType]] = None

    id: str = ""
    type: str = ""

    @field_validator("id", "type", mode="before")
    def default_blank(cls, v: Any) -> Any:
        return "" if v is None else v


class LocalSource(SourceBase):
    """Log files on this host."""

    source_type: ClassVar[Optional[SourceType]] = SourceType.LOCAL

    path: str = ""
    pattern: str = ""


class SftpSource(SourceBase):
    """Log files pulled from a remote host over SFTP."""

    source_type: ClassVar[Optional[SourceType]] = SourceType.SFTP

    host: str = ""
    port: Optional[int] = None
    user: str = ""
    auth: Optional[SourceAuth] = None
    path: str = ""
    pattern: str = ""


class HttpSource(SourceBase):
    """Log files fetched over HTTP, optionally through an index document."""

    source_type: ClassVar[Optional[SourceType]] = SourceType.HTTP

    url: str = ""
    index: Optional[SourceIndex] = None


class S3Source(SourceBase):
    """Log objects in an S3-compatible bucket."""

    source_type: ClassVar[Optional[SourceType]] = SourceType.S3

    bucket: str = ""
    prefix: str = ""
    region: str = ""
    endpoint: str = ""
    access_key: str = ""
    secret_key: str = ""


class AgentSource(SourceBase):
    """Records pushed by a log agent; no transport settings."""

    source_type: ClassVar[Optional[SourceType]] = SourceType.AGENT


class UnknownSource(SourceBase):
    """A blank or unsupported ``type``; kept so validation can report it."""


UNKNOWN_SOURCE_TAG = "unknown"


def source_tag(value: Any) -> Optional[str]:
    """Discriminator: the normalized ``type`` or the catch-all tag."""
    if isinstance(value, dict):
        raw = value.get("type")
    elif isinstance(value, SourceBase):
        raw = value.type
    else:
        return None
    source_type = SourceType.parse(None if raw is None else str(raw))
    return source_type.value if source_type else UNKNOWN_SOURCE_TAG


Source = Annotated[
    Union[
        Annotated[LocalSource, Tag(SourceType.LOCAL.value)],
        Annotated[SftpSource, Tag(SourceType.SFTP.value)],
        Annotated[HttpSource, Tag(SourceType.HTTP.value)],
        Annotated[S3Source, Tag(SourceType.S3.value)],
        Annotated[AgentSource, Tag(SourceType.AGENT.value)],
        Annotated[UnknownSource, Tag(UNKNOWN_SOURCE_TAG)],
    ],
    Discriminator(source_tag),
]


class WebsiteConfig(ConfigModel):
    """A monitored website: either a legacy ``logPath`` or a list of sources."""

    name: str = ""
    log_path: str = ""
    sources: List[Source] = Field(default_factory=list)

    @field_validator("sources", mode="before")
    def default_sources(cls, v: Any) -> Any:
        return [] if v is None else v


class DatabaseConfig(ConfigModel):
    driver: str = ""
    dsn: str = ""


class SystemConfig(ConfigModel):
    log_retention_days: int = 0
    parse_batch_size: int = 0
    ip_geo_cache_limit: int = 0


class PVFilterConfig(ConfigModel):
    """Page-view filter rules."""

    status_code_include: List[int] = Field(default_factory=list)
    exclude_patterns: List[str] = Field(default_factory=list)
    exclude_ips: List[str] = Field(default_factory=list, alias="excludeIPs")

    @field_validator("status_code_include", "exclude_patterns", "exclude_ips", mode="before")
    def default_lists(cls, v: Any) -> Any:
        return [] if v is None else v


class Configuration(ConfigModel):
    """Root of the configuration tree."""

    websites: List[WebsiteConfig] = Field(default_factory=list)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
    pv_filter: PVFilterConfig = Field(default_factory=PVFilterConfig)

    @field_validator("websites", mode="before")
    def default_websites(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("database", "system", "pv_filter", mode="before")
    def default_sections(cls, v: Any) -> Any:
        return {} if v is None else v
