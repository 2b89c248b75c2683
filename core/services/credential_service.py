# =============================================================================
# core/services/credential_service.py - Admin Credentials and Tokens
# =============================================================================
# Single-admin authentication for the file-drop service:
# - credential record (username + bcrypt hash) stored as JSON on disk
# - first-run setup, or bootstrap from ADMIN_USERNAME/ADMIN_PASSWORD
# - HS256 bearer tokens signed with AUTH_SECRET
#
# Tokens carry a fingerprint of the stored hash, so changing the password
# revokes every token issued before the change.
# =============================================================================

import hashlib
import json
import logging
import time
from pathlib import Path

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from core.models.credentials import CredentialRecord
from app.exceptions import (
    AlreadyConfiguredError,
    InvalidCredentialsError,
    InvalidTokenError,
    SetupRequiredError,
)

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


# =============================================================================
# Password Hashing
# =============================================================================

def _prehash(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; a SHA-256 digest keeps every
    # character of longer passwords significant
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("ascii")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def _fingerprint(record: CredentialRecord) -> str:
    return hashlib.sha256(f"{record.username}|{record.password_hash}".encode("utf-8")).hexdigest()[:16]


# =============================================================================
# Credential Store
# =============================================================================

class CredentialStore:
    """
    Admin credential storage and token handling.

    Everything it needs is passed in at construction; it never reads
    settings on its own.

    Example:
        store = CredentialStore(Path("credentials.json"), secret="...")
        token = store.setup("admin", "hunter2")
        username = store.verify_token(token)
    """

    def __init__(
        self,
        creds_path: Path,
        secret: str,
        admin_username: str | None = None,
        admin_password: str | None = None,
        token_ttl_hours: int = 168,
    ):
        self.creds_path = Path(creds_path)
        self.secret = secret
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.token_ttl_seconds = token_ttl_hours * 3600

    # -------------------------------------------------------------------------
    # Record Storage
    # -------------------------------------------------------------------------

    def credentials_exist(self) -> bool:
        return self.creds_path.exists()

    def is_configured(self) -> bool:
        """True once an admin exists on disk or can be bootstrapped from env."""
        return self.credentials_exist() or bool(self.admin_password)

    def _load(self) -> CredentialRecord | None:
        if not self.credentials_exist():
            return None
        raw = json.loads(self.creds_path.read_text(encoding="utf-8"))
        return CredentialRecord(**raw)

    def _save(self, record: CredentialRecord) -> None:
        self.creds_path.parent.mkdir(parents=True, exist_ok=True)
        self.creds_path.write_text(
            json.dumps(record.model_dump(), indent=2),
            encoding="utf-8",
        )

    def get_credentials(self) -> CredentialRecord | None:
        """
        Load the admin record, bootstrapping it from env on first use.

        Returns:
            The record, or None if nothing is configured yet
        """
        existing = self._load()
        if existing:
            return existing

        if self.admin_password:
            record = CredentialRecord(
                username=self.admin_username or "admin",
                password_hash=hash_password(self.admin_password),
            )
            self._save(record)
            logger.info(f"Bootstrapped admin account '{record.username}' from environment")
            return record

        return None

    # -------------------------------------------------------------------------
    # Setup and Login
    # -------------------------------------------------------------------------

    def setup(self, username: str, password: str) -> str:
        """
        First-run setup: create the admin account.

        Returns:
            A bearer token for the new account

        Raises:
            AlreadyConfiguredError: If an admin already exists
        """
        if self.is_configured():
            raise AlreadyConfiguredError()

        record = CredentialRecord(username=username, password_hash=hash_password(password))
        self._save(record)
        logger.info(f"Created admin account '{username}'")
        return self.issue_token(record)

    def login(self, username: str, password: str) -> str:
        """
        Exchange a username and password for a bearer token.

        Raises:
            SetupRequiredError: If no admin exists
            InvalidCredentialsError: On a wrong username or password
        """
        record = self.get_credentials()
        if not record:
            raise SetupRequiredError()

        if username != record.username or not verify_password(password, record.password_hash):
            logger.warning(f"Failed login attempt for '{username}'")
            raise InvalidCredentialsError()

        return self.issue_token(record)

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def issue_token(self, record: CredentialRecord) -> str:
        now = int(time.time())
        payload = {
            "sub": record.username,
            "cred": _fingerprint(record),
            "iat": now,
            "exp": now + self.token_ttl_seconds,
        }
        return jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)

    def verify_token(self, token: str | None) -> str:
        """
        Validate a bearer token.

        Returns:
            The admin username

        Raises:
            SetupRequiredError: If no admin exists
            InvalidTokenError: If the token is missing, forged, expired or
                was issued for an older password
        """
        record = self.get_credentials()
        if not record:
            raise SetupRequiredError()

        if not token:
            raise InvalidTokenError()

        try:
            payload = jwt.decode(token, self.secret, algorithms=[TOKEN_ALGORITHM])
        except ExpiredSignatureError:
            logger.warning("Bearer token has expired")
            raise InvalidTokenError("Token has expired")
        except JWTError as e:
            logger.warning(f"Bearer token validation failed: {e}")
            raise InvalidTokenError()

        if payload.get("sub") != record.username or payload.get("cred") != _fingerprint(record):
            logger.warning("Bearer token does not match the current credentials")
            raise InvalidTokenError()

        return record.username
