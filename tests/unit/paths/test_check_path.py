"""
Tests for log path existence checks.

Covers literal paths, glob patterns, setup-mode tolerance and the
distinction between absence and missing permissions.
"""

import errno
from pathlib import Path
from unittest.mock import patch

import pytest

from logpulse.core.paths import (
    MSG_EMPTY,
    MSG_INACCESSIBLE,
    MSG_MISSING,
    MSG_MISSING_SETUP,
    MSG_NO_MATCH,
    MSG_NO_MATCH_SETUP,
    MSG_PERMISSION,
    PathStatus,
    check_path,
)


class TestEmptyInput:
    """Blank values are always errors."""

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None])
    def test_blank_path_is_error(self, value) -> None:
        result = check_path(value, allow_missing=True)
        assert result.status is PathStatus.ERROR
        assert result.message == MSG_EMPTY


class TestLiteralPaths:
    """Literal paths are checked with stat."""

    def test_existing_file_is_ok(self, log_file: Path) -> None:
        result = check_path(str(log_file))
        assert result.ok
        assert result.message == ""

    def test_existing_directory_is_ok(self, tmp_path: Path) -> None:
        assert check_path(str(tmp_path)).ok

    def test_surrounding_whitespace_is_ignored(self, log_file: Path) -> None:
        assert check_path(f"  {log_file}  ").ok

    def test_missing_path_is_error(self, tmp_path: Path) -> None:
        result = check_path(str(tmp_path / "missing.log"), allow_missing=False)
        assert result.status is PathStatus.ERROR
        assert result.message == MSG_MISSING

    def test_missing_path_is_warning_during_setup(self, tmp_path: Path) -> None:
        result = check_path(str(tmp_path / "missing.log"), allow_missing=True)
        assert result.status is PathStatus.WARNING
        assert result.message == MSG_MISSING_SETUP

    def test_permission_denied_is_error_even_during_setup(self, tmp_path: Path) -> None:
        """Missing privileges are never tolerated, and say so."""
        with patch("logpulse.core.paths.os.stat", side_effect=PermissionError(errno.EACCES, "denied")):
            result = check_path(str(tmp_path / "secret.log"), allow_missing=True)

        assert result.status is PathStatus.ERROR
        assert result.message == MSG_PERMISSION
        assert result.message != MSG_MISSING

    def test_other_os_error_is_generic_error(self, tmp_path: Path) -> None:
        with patch("logpulse.core.paths.os.stat", side_effect=OSError(errno.EIO, "i/o error")):
            result = check_path(str(tmp_path / "flaky.log"), allow_missing=True)

        assert result.status is PathStatus.ERROR
        assert result.message == MSG_INACCESSIBLE

    def test_embedded_null_byte_is_generic_error(self) -> None:
        result = check_path("/var/log/bad\x00name.log", allow_missing=True)
        assert result.status is PathStatus.ERROR
        assert result.message == MSG_INACCESSIBLE


class TestGlobPatterns:
    """Patterns with wildcards are expanded instead of stat-ed."""

    def test_matching_pattern_is_ok(self, log_file: Path) -> None:
        assert check_path(str(log_file.parent / "*.log")).ok

    def test_question_mark_wildcard_is_expanded(self, log_file: Path) -> None:
        assert check_path(str(log_file.parent / "access.lo?")).ok

    def test_pattern_without_matches_is_error(self, tmp_path: Path) -> None:
        result = check_path(str(tmp_path / "*.gz"), allow_missing=False)
        assert result.status is PathStatus.ERROR
        assert result.message == MSG_NO_MATCH

    def test_pattern_without_matches_is_warning_during_setup(self, tmp_path: Path) -> None:
        result = check_path(str(tmp_path / "*.gz"), allow_missing=True)
        assert result.status is PathStatus.WARNING
        assert result.message == MSG_NO_MATCH_SETUP

    @pytest.mark.parametrize("allow_missing, expected", [
        (False, PathStatus.ERROR),
        (True, PathStatus.WARNING),
    ])
    def test_expansion_failure_counts_as_no_match(self, tmp_path: Path, allow_missing, expected) -> None:
        with patch("logpulse.core.paths.glob.glob", side_effect=OSError("cannot list")):
            result = check_path(str(tmp_path / "*.log"), allow_missing=allow_missing)
        assert result.status is expected
