"""
Admin authentication.
"""

import secrets
from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import get_settings
from .exceptions import AuthenticationError

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)


async def authenticate_admin_token(
    token: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Authenticate bearer token against the configured admin token.

    Admin endpoints are disabled while no admin token is configured.
    """
    if not token or not token.credentials:
        raise AuthenticationError("Missing authentication token")

    token_value = token.credentials.strip()
    admin_token = get_settings().security.admin_token

    if not admin_token:
        logger.warning("Admin request rejected: no admin token configured")
        raise AuthenticationError("Admin endpoints are disabled")

    if not secrets.compare_digest(token_value, admin_token):
        logger.warning(
            "Authentication failed: invalid admin token",
            token=token_value[:8] + "..." if len(token_value) >= 8 else "invalid",
        )
        raise AuthenticationError("Invalid authentication token")

    logger.debug("Admin token authenticated", token=token_value[:8] + "...")
    return token_value
