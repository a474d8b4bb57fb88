"""
Page-view (PV) filter.

Decides per parsed log record whether the request counts as a page view.
Rules are compiled into an immutable PVFilterState; the engine publishes a
whole new state on every initialization and readers always work against
one complete snapshot.
"""

import re
import threading
from dataclasses import dataclass
from typing import FrozenSet, Optional, Pattern, Tuple

import structlog

from ..models.configuration import Configuration
from .exceptions import ConfigurationError, FilterInitializationError, FilterNotInitializedError
from .ip import is_private_ip, normalize_ip

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PVFilterState:
    """Immutable snapshot of the PV filter rules."""

    status_codes: FrozenSet[int]
    compiled_patterns: Tuple[Pattern[str], ...]
    exclude_ips: FrozenSet[str]

    @classmethod
    def from_config(cls, cfg: Configuration) -> "PVFilterState":
        """
        Build a snapshot from the ``pvFilter`` section.

        Raises FilterInitializationError when an exclude pattern does not
        compile: a filter that silently drops a rule would count traffic it
        was told to exclude.
        """
        if cfg is None:
            raise ConfigurationError("Cannot build PV filter without a configuration")

        pv = cfg.pv_filter

        compiled = []
        for index, pattern in enumerate(pv.exclude_patterns):
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise FilterInitializationError(
                    f"Invalid PV exclude pattern at index {index}: {pattern!r}",
                    details={"index": index, "pattern": pattern, "error": str(e)},
                ) from e

        exclude_ips = frozenset(
            normalized for normalized in (normalize_ip(ip) for ip in pv.exclude_ips) if normalized
        )

        return cls(
            status_codes=frozenset(pv.status_code_include),
            compiled_patterns=tuple(compiled),
            exclude_ips=exclude_ips,
        )

    def classify(self, status_code: int, path: str, raw_ip: str) -> bool:
        """True when the record counts as a page view."""
        if status_code not in self.status_codes:
            return False

        ip = normalize_ip(raw_ip)
        if is_private_ip(ip):
            return False

        if ip and ip in self.exclude_ips:
            return False

        path = path or ""
        for pattern in self.compiled_patterns:
            if pattern.search(path):
                return False

        return True


class PVFilterEngine:
    """
    Holds the current PVFilterState behind a swappable reference.

    initialize() builds the new state outside the lock and publishes it with
    a single assignment; classify() reads the reference once per call, so a
    record is never evaluated against a mix of two configurations.
    """

    def __init__(self) -> None:
        self._state: Optional[PVFilterState] = None
        self._lock = threading.Lock()

    def initialize(self, cfg: Configuration) -> PVFilterState:
        """Build and publish a new snapshot; the old one stays on failure."""
        state = PVFilterState.from_config(cfg)

        with self._lock:
            previous = self._state
            self._state = state

        logger.info(
            "PV filter initialized",
            status_codes=len(state.status_codes),
            exclude_patterns=len(state.compiled_patterns),
            exclude_ips=len(state.exclude_ips),
            replaced=previous is not None,
        )
        return state

    def snapshot(self) -> Optional[PVFilterState]:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    def classify(self, status_code: int, path: str, raw_ip: str) -> bool:
        state = self._state
        if state is None:
            raise FilterNotInitializedError()
        return state.classify(status_code, path, raw_ip)


# Global PV filter engine instance
_pv_filter_engine: Optional[PVFilterEngine] = None
_engine_lock = threading.Lock()


def get_pv_filter_engine() -> PVFilterEngine:
    """Get or create the global PV filter engine instance."""
    global _pv_filter_engine

    if _pv_filter_engine is None:
        with _engine_lock:
            if _pv_filter_engine is None:
                _pv_filter_engine = PVFilterEngine()

    return _pv_filter_engine


def initialize_pv_filters(cfg: Configuration) -> PVFilterState:
    """Build the process-wide PV filter from a configuration."""
    return get_pv_filter_engine().initialize(cfg)


def should_count_as_page_view(status_code: int, path: str, raw_ip: str) -> bool:
    """Classify one record against the process-wide PV filter."""
    return get_pv_filter_engine().classify(status_code, path, raw_ip)
