"""
Log path existence checks.

Classifies a literal path or glob pattern as present, absent or
inaccessible. Missing paths can be tolerated as warnings during
first-time setup; permission problems never are.
"""

import glob
import os
from dataclasses import dataclass
from enum import Enum


class PathStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class PathCheckResult:
    status: PathStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is PathStatus.OK


MSG_EMPTY = "path must not be empty"
MSG_NO_MATCH = "log path pattern does not match any file"
MSG_NO_MATCH_SETUP = (
    "log path pattern does not match any file yet; "
    "acceptable during initial setup, create the files later"
)
MSG_MISSING = "log path does not exist"
MSG_MISSING_SETUP = (
    "log path does not exist yet; "
    "acceptable during initial setup, create it later"
)
MSG_PERMISSION = (
    "log path is not accessible: the service user lacks permission to read it"
)
MSG_INACCESSIBLE = "log path does not exist or is not accessible"


def _missing(allow_missing: bool, message: str, setup_message: str) -> PathCheckResult:
    if allow_missing:
        return PathCheckResult(PathStatus.WARNING, setup_message)
    return PathCheckResult(PathStatus.ERROR, message)


def check_path(value: str, allow_missing: bool = False) -> PathCheckResult:
    """
    Check that a log path or glob pattern points at something readable.

    Args:
        value: Literal path or glob pattern
        allow_missing: Report absence as a warning instead of an error

    Returns:
        PathCheckResult with status ok, warning or error
    """
    value = (value or "").strip()
    if not value:
        return PathCheckResult(PathStatus.ERROR, MSG_EMPTY)

    if glob.has_magic(value):
        # A failed expansion counts as no match
        try:
            matches = glob.glob(value)
        except (OSError, ValueError):
            matches = []
        if not matches:
            return _missing(allow_missing, MSG_NO_MATCH, MSG_NO_MATCH_SETUP)
        return PathCheckResult(PathStatus.OK)

    try:
        os.stat(value)
    except FileNotFoundError:
        return _missing(allow_missing, MSG_MISSING, MSG_MISSING_SETUP)
    except PermissionError:
        return PathCheckResult(PathStatus.ERROR, MSG_PERMISSION)
    except (OSError, ValueError):
        return PathCheckResult(PathStatus.ERROR, MSG_INACCESSIBLE)

    return PathCheckResult(PathStatus.OK)
