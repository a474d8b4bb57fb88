"""
Tests for PV filter snapshots: construction and per-record decisions.
"""

from typing import Callable
from unittest.mock import patch

import pytest

from logpulse.core.exceptions import ConfigurationError, FilterInitializationError
from logpulse.core.pv_filter import PVFilterState
from logpulse.models.configuration import Configuration

PUBLIC_IP = "93.184.216.34"


@pytest.fixture
def state(valid_config: Configuration) -> PVFilterState:
    return PVFilterState.from_config(valid_config)


class TestFromConfig:
    """Building a snapshot from the pvFilter section."""

    def test_rules_are_loaded(self, state: PVFilterState) -> None:
        assert state.status_codes == frozenset({200, 304})
        assert [p.pattern for p in state.compiled_patterns] == [r"\.css$", r"^/admin"]

    def test_exclude_ips_are_normalized_and_blanks_dropped(self, state: PVFilterState) -> None:
        assert state.exclude_ips == frozenset({"8.8.4.4", "1.1.1.1", "crawler.example.com"})

    def test_invalid_pattern_fails_with_index(self, make_config: Callable[..., Configuration]) -> None:
        cfg = make_config(pvFilter={"statusCodeInclude": [200], "excludePatterns": [r"\.js$", "(unclosed"]})

        with pytest.raises(FilterInitializationError) as exc_info:
            PVFilterState.from_config(cfg)

        exc = exc_info.value
        assert exc.status_code == 500
        assert exc.details["index"] == 1
        assert exc.details["pattern"] == "(unclosed"
        assert "index 1" in str(exc)

    def test_none_config_is_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            PVFilterState.from_config(None)

    def test_empty_section_builds_empty_state(self) -> None:
        state = PVFilterState.from_config(Configuration())
        assert state.status_codes == frozenset()
        assert state.compiled_patterns == ()
        assert state.exclude_ips == frozenset()

    def test_state_is_immutable(self, state: PVFilterState) -> None:
        with pytest.raises(AttributeError):
            state.status_codes = frozenset({404})


class TestClassify:
    """Decisions: status code, private range, exclusion list, path patterns."""

    @pytest.mark.parametrize("status_code, path, ip, expected", [
        (200, "/index.html", PUBLIC_IP, True),
        (304, "/blog/post-1", PUBLIC_IP, True),
        (404, "/index.html", PUBLIC_IP, False),
        (500, "/index.html", PUBLIC_IP, False),
        (200, "/static/site.css", PUBLIC_IP, False),
        (200, "/admin/users", PUBLIC_IP, False),
        (200, "/blog/admin", PUBLIC_IP, True),
        (200, "/site.css?v=2", PUBLIC_IP, True),
        (200, "/", "10.0.0.5", False),
        (200, "/", "127.0.0.1:51234", False),
        (200, "/", "[::1]:9000", False),
        (200, "/", "8.8.4.4:5555", False),
        (200, "/", "1.1.1.1", False),
        (200, "/", "crawler.example.com", False),
        (200, "/", f"{PUBLIC_IP}, 10.0.0.1", True),
        (200, "/", f"10.0.0.1, {PUBLIC_IP}", False),
        (200, "/", "2606:4700::1111", True),
        (200, "/", "", True),
        (200, "", PUBLIC_IP, True),
    ])
    def test_decisions(self, state: PVFilterState, status_code: int, path: str, ip: str, expected: bool) -> None:
        assert state.classify(status_code, path, ip) is expected

    @pytest.mark.parametrize("ip", ["203.0.113.5", "198.51.100.7", "192.0.2.1", "198.18.0.1"])
    def test_documentation_and_benchmark_addresses_count(self, state: PVFilterState, ip: str) -> None:
        assert state.classify(200, "/", ip) is True

    def test_missing_path_is_treated_as_empty(self, state: PVFilterState) -> None:
        assert state.classify(200, None, PUBLIC_IP) is True

    def test_status_code_rejects_before_address_work(self, state: PVFilterState) -> None:
        with patch("logpulse.core.pv_filter.normalize_ip") as mock_normalize:
            assert state.classify(404, "/", PUBLIC_IP) is False
        mock_normalize.assert_not_called()

    def test_private_address_rejects_before_patterns(self, state: PVFilterState) -> None:
        """A private client never reaches the path patterns."""
        pattern_calls = []

        class RecordingPattern:
            def __init__(self, inner):
                self.inner = inner

            def search(self, path):
                pattern_calls.append(path)
                return self.inner.search(path)

        recording = PVFilterState(
            status_codes=state.status_codes,
            compiled_patterns=tuple(RecordingPattern(p) for p in state.compiled_patterns),
            exclude_ips=state.exclude_ips,
        )
        assert recording.classify(200, "/index.html", "192.168.0.10") is False
        assert pattern_calls == []

        assert recording.classify(200, "/index.html", PUBLIC_IP) is True
        assert pattern_calls == ["/index.html", "/index.html"]

    def test_decisions_are_repeatable(self, state: PVFilterState) -> None:
        first = [state.classify(200, "/a", PUBLIC_IP) for _ in range(3)]
        assert first == [True, True, True]
