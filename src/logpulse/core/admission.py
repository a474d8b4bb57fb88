"""
Admission control: validate the configuration, then publish the PV filter.

Shared by service startup and the admin reload endpoint. A configuration
with validation errors never reaches the PV filter.
"""

from typing import Optional

import structlog

from ..config import Settings, get_settings, load_configuration
from ..models.configuration import Configuration
from ..models.validation import ValidateOptions, ValidationResult
from .exceptions import ConfigurationError, ConfigValidationError, FilterInitializationError
from .metrics import MetricsCollector
from .pv_filter import PVFilterEngine, PVFilterState, get_pv_filter_engine
from .validator import validate_config

logger = structlog.get_logger(__name__)


def options_from_settings(settings: Settings) -> ValidateOptions:
    return ValidateOptions(check_paths=settings.check_paths, check_remote=settings.check_remote)


class AdmissionService:
    """
    Runs validation and filter initialization.

    ``last_result`` is the validation of the most recent attempt, admitted or
    not. ``admitted_result`` belongs to the configuration behind the PV
    filter snapshot currently published, and only changes when a new
    snapshot is.
    """

    def __init__(
        self,
        engine: Optional[PVFilterEngine] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.engine = engine or get_pv_filter_engine()
        self.metrics = metrics
        self.last_result: Optional[ValidationResult] = None
        self.admitted_result: Optional[ValidationResult] = None

    @property
    def is_ready(self) -> bool:
        return self.engine.is_initialized and self.admitted_result is not None

    def validate(
        self,
        cfg: Optional[Configuration],
        opts: ValidateOptions,
        setup_mode: Optional[bool] = None,
    ) -> ValidationResult:
        result = validate_config(cfg, opts, setup_mode=setup_mode)
        if self.metrics:
            self.metrics.record_validation(result)
        return result

    def admit(
        self,
        cfg: Configuration,
        opts: ValidateOptions,
        setup_mode: Optional[bool] = None,
    ) -> PVFilterState:
        """
        Validate cfg and, when it has no errors, publish a new PV filter.

        Raises:
            ConfigValidationError: validation reported errors
            FilterInitializationError: an exclude pattern did not compile;
                the previous filter stays active
        """
        result = self.validate(cfg, opts, setup_mode=setup_mode)
        self.last_result = result

        for warning in result.warnings:
            logger.warning("Configuration warning", field=warning.field, message=warning.message)

        if not result.is_valid:
            for error in result.errors:
                logger.error("Configuration error", field=error.field, message=error.message)
            raise ConfigValidationError(result)

        try:
            state = self.engine.initialize(cfg)
        except FilterInitializationError:
            if self.metrics:
                self.metrics.record_filter_reload(None)
            raise

        self.admitted_result = result
        if self.metrics:
            self.metrics.record_filter_reload(state)
        return state

    def startup(self, settings: Optional[Settings] = None) -> Optional[PVFilterState]:
        """
        Load, validate and admit the configured file.

        In setup mode a configuration with errors is tolerated: the service
        starts without a PV filter so the operator can finish the setup.
        """
        settings = settings or get_settings()
        try:
            cfg = load_configuration(settings.config_path)
        except ConfigurationError as e:
            if not settings.setup_mode:
                raise
            logger.warning("Starting in setup mode without a usable configuration", error=str(e))
            return None

        try:
            return self.admit(cfg, options_from_settings(settings), setup_mode=settings.setup_mode)
        except ConfigValidationError as e:
            if not settings.setup_mode:
                raise
            logger.warning(
                "Starting in setup mode with an incomplete configuration",
                errors=len(e.result.errors),
                warnings=len(e.result.warnings),
            )
            return None
