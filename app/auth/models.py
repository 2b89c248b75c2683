# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated admin extracted from a verified bearer token.
    """
    model_config = ConfigDict(frozen=True)

    username: str


class LoginRequest(BaseModel):
    """Body for POST /api/login and POST /api/auth/setup."""
    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Bearer token handed back after login or setup."""
    token: str


class AuthStateResponse(BaseModel):
    """Whether an admin account exists (or can be bootstrapped from env)."""
    configured: bool
