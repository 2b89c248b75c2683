# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"username": user.username}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.auth.models import AuthUser
from app.dependencies import CredentialStoreDep

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. auto_error is off so that a missing header
# still goes through verify_token(), which reports "Setup required" first.
security = HTTPBearer(auto_error=False)


async def get_current_user(
    store: CredentialStoreDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Validate the bearer token and return the admin.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies signature, expiry and credential fingerprint
    3. Returns an AuthUser with the admin's username

    Raises:
        SetupRequiredError: 401 if no admin has been configured
        InvalidTokenError: 401 if the token is missing or invalid
    """
    token = credentials.credentials if credentials else None
    username = store.verify_token(token)
    logger.debug(f"Authenticated user: {username}")
    return AuthUser(username=username)
