"""
Configuration validator.

Walks the whole configuration tree and reports every problem found in a
single pass. Nothing here raises for bad input: problems are collected as
FieldErrors, errors block startup and warnings are advisory.
"""

from typing import Any, Callable, Dict, List, Optional, Set, Type

import structlog

from ..config import is_setup_mode
from ..models.configuration import (
    AgentSource,
    Configuration,
    HttpSource,
    LocalSource,
    S3Source,
    SftpSource,
    SourceBase,
    WebsiteConfig,
)
from ..models.validation import FieldError, ValidateOptions, ValidationResult
from .paths import PathStatus, check_path

logger = structlog.get_logger(__name__)

SUPPORTED_DATABASE_DRIVER = "postgres"


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


class ValidationCollector:
    """Accumulates errors and warnings in the order checks run."""

    def __init__(self) -> None:
        self.errors: List[FieldError] = []
        self.warnings: List[FieldError] = []

    def error(self, field: str, message: str) -> None:
        self.errors.append(FieldError(field=field, message=message))

    def warning(self, field: str, message: str) -> None:
        self.warnings.append(FieldError(field=field, message=message))

    def require(self, value: Optional[str], field: str, message: str) -> bool:
        """Record an error when value is blank; True when present."""
        if _blank(value):
            self.error(field, message)
            return False
        return True

    def path(self, value: str, field: str, allow_missing: bool) -> None:
        """Run a path check and record its outcome on field."""
        result = check_path(value, allow_missing)
        if result.status is PathStatus.WARNING:
            self.warning(field, result.message)
        elif result.status is PathStatus.ERROR:
            self.error(field, result.message)

    def result(self) -> ValidationResult:
        return ValidationResult(errors=tuple(self.errors), warnings=tuple(self.warnings))


class _SourceContext:
    """What a per-type source check needs besides the source itself."""

    def __init__(self, collector: ValidationCollector, prefix: str,
                 opts: ValidateOptions, allow_missing: bool) -> None:
        self.collector = collector
        self.prefix = prefix
        self.opts = opts
        self.allow_missing = allow_missing

    def field(self, name: str) -> str:
        return f"{self.prefix}.{name}"


def _check_local(src: LocalSource, ctx: _SourceContext) -> None:
    c = ctx.collector
    if _blank(src.path) and _blank(src.pattern):
        c.error(ctx.prefix, "local source requires path or pattern")
        return
    if not ctx.opts.check_paths:
        return
    if src.path:
        c.path(src.path, ctx.field("path"), ctx.allow_missing)
    if src.pattern:
        c.path(src.pattern, ctx.field("pattern"), ctx.allow_missing)


def _check_sftp(src: SftpSource, ctx: _SourceContext) -> None:
    c = ctx.collector
    c.require(src.host, ctx.field("host"), "sftp host must not be empty")
    c.require(src.user, ctx.field("user"), "sftp user must not be empty")
    if src.auth is None or (_blank(src.auth.key_file) and _blank(src.auth.password)):
        c.error(ctx.field("auth"), "sftp source requires auth.keyFile or auth.password")
    if _blank(src.path) and _blank(src.pattern):
        c.error(ctx.prefix, "sftp source requires path or pattern")
    elif ctx.opts.check_remote:
        c.warning(ctx.prefix, "remote path verification is not supported yet")


def _check_http(src: HttpSource, ctx: _SourceContext) -> None:
    c = ctx.collector
    c.require(src.url, ctx.field("url"), "http url must not be empty")
    if src.index is not None:
        c.require(src.index.url, ctx.field("index.url"), "http index url must not be empty")


def _check_s3(src: S3Source, ctx: _SourceContext) -> None:
    c = ctx.collector
    c.require(src.bucket, ctx.field("bucket"), "s3 bucket must not be empty")
    if _blank(src.access_key) != _blank(src.secret_key):
        c.error(ctx.field("accessKey"), "s3 accessKey and secretKey must be set together")


def _check_agent(src: AgentSource, ctx: _SourceContext) -> None:
    # Agents push their own records; nothing to check
    return None


SOURCE_CHECKS: Dict[Type[SourceBase], Callable[[Any, _SourceContext], None]] = {
    LocalSource: _check_local,
    SftpSource: _check_sftp,
    HttpSource: _check_http,
    S3Source: _check_s3,
    AgentSource: _check_agent,
}


def _validate_sources(
    collector: ValidationCollector,
    site: WebsiteConfig,
    site_prefix: str,
    opts: ValidateOptions,
    allow_missing: bool,
) -> None:
    seen: Set[str] = set()
    for j, src in enumerate(site.sources):
        prefix = f"{site_prefix}.sources[{j}]"

        source_id = (src.id or "").strip()
        if not source_id:
            collector.error(f"{prefix}.id", "source id must not be empty")
        elif source_id in seen:
            collector.error(f"{prefix}.id", f"duplicate source id '{source_id}'")
        else:
            seen.add(source_id)

        if _blank(src.type):
            collector.error(f"{prefix}.type", "source type must not be empty")
            continue

        check = SOURCE_CHECKS.get(type(src))
        if check is None:
            collector.error(f"{prefix}.type", f"unsupported source type '{src.type.strip()}'")
            continue

        check(src, _SourceContext(collector, prefix, opts, allow_missing))


def _validate_globals(collector: ValidationCollector, cfg: Configuration) -> None:
    driver = (cfg.database.driver or "").strip()
    if not driver:
        collector.error("database.driver", "database driver must not be empty")
    elif driver != SUPPORTED_DATABASE_DRIVER:
        collector.error(
            "database.driver",
            f"unsupported database driver '{driver}', only {SUPPORTED_DATABASE_DRIVER} is supported",
        )
    collector.require(cfg.database.dsn, "database.dsn", "database dsn must not be empty")

    system_limits = (
        ("system.logRetentionDays", cfg.system.log_retention_days),
        ("system.parseBatchSize", cfg.system.parse_batch_size),
        ("system.ipGeoCacheLimit", cfg.system.ip_geo_cache_limit),
    )
    for field, value in system_limits:
        if value is None or value <= 0:
            name = field.split(".", 1)[1]
            collector.error(field, f"{name} must be greater than 0")

    if not cfg.pv_filter.status_code_include:
        collector.error("pvFilter.statusCodeInclude", "statusCodeInclude must not be empty")
    if not cfg.pv_filter.exclude_patterns:
        collector.error("pvFilter.excludePatterns", "excludePatterns must not be empty")


def validate_config(
    cfg: Optional[Configuration],
    opts: Optional[ValidateOptions] = None,
    setup_mode: Optional[bool] = None,
) -> ValidationResult:
    """
    Validate a configuration tree.

    Args:
        cfg: Configuration to check
        opts: Enables filesystem and remote checks
        setup_mode: Tolerate missing local paths; defaults to the process
            setup-mode signal

    Returns:
        ValidationResult listing every error and warning, in check order
    """
    opts = opts or ValidateOptions()
    collector = ValidationCollector()

    if cfg is None:
        collector.error("config", "configuration must not be empty")
        return collector.result()

    if setup_mode is None:
        setup_mode = is_setup_mode()

    if not cfg.websites:
        collector.error("websites", "at least one website must be configured")

    for i, site in enumerate(cfg.websites):
        site_prefix = f"websites[{i}]"
        collector.require(site.name, f"{site_prefix}.name", "website name must not be empty")

        if not site.sources:
            field = f"{site_prefix}.logPath"
            if collector.require(site.log_path, field, "log path must not be empty") and opts.check_paths:
                collector.path(site.log_path, field, setup_mode)
            continue

        _validate_sources(collector, site, site_prefix, opts, setup_mode)

    _validate_globals(collector, cfg)

    result = collector.result()
    logger.info(
        "Configuration validated",
        websites=len(cfg.websites),
        errors=len(result.errors),
        warnings=len(result.warnings),
        check_paths=opts.check_paths,
        check_remote=opts.check_remote,
        setup_mode=setup_mode,
    )
    return result
