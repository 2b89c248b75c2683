# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# First-run setup, login, and setup state for the single admin account.
# =============================================================================

import logging

from fastapi import APIRouter

from app.auth.models import AuthStateResponse, LoginRequest, TokenResponse
from app.dependencies import CredentialStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/auth/state", response_model=AuthStateResponse)
async def get_auth_state(store: CredentialStoreDep) -> AuthStateResponse:
    """
    Report whether an admin account exists.

    The front end uses this to decide between the setup and login forms.
    """
    return AuthStateResponse(configured=store.is_configured())


@router.post("/auth/setup", response_model=TokenResponse)
async def setup_admin(body: LoginRequest, store: CredentialStoreDep) -> TokenResponse:
    """
    Create the admin account on first run.

    Raises:
        400: If an admin already exists (or ADMIN_PASSWORD is set)
    """
    return TokenResponse(token=store.setup(body.username, body.password))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, store: CredentialStoreDep) -> TokenResponse:
    """
    Exchange username and password for a bearer token.

    Raises:
        401: If setup hasn't happened or the credentials are wrong
    """
    return TokenResponse(token=store.login(body.username, body.password))
