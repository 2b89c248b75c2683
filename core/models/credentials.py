# =============================================================================
# core/models/credentials.py - Credential Record Schema
# =============================================================================
# The admin account as persisted in CREDS_PATH.
# =============================================================================

from pydantic import BaseModel, Field


class CredentialRecord(BaseModel):
    """
    Admin credentials as stored on disk.

    Only the bcrypt hash is kept, never the password.

    Example:
        {"username": "admin", "password_hash": "$2b$12$..."}
    """

    username: str = Field(..., min_length=1)

    password_hash: str = Field(..., description="bcrypt hash of the SHA-256 pre-hashed password")
