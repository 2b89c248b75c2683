# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Points the storage root and credentials at temp directories
# - Provides an API client with dependencies bound to per-test folders
# =============================================================================

import os
import tempfile

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

_TEST_HOME = tempfile.mkdtemp(prefix="filedrop-tests-")

os.environ.setdefault("UPLOAD_DIR", os.path.join(_TEST_HOME, "uploads"))
os.environ.setdefault("CREDS_PATH", os.path.join(_TEST_HOME, "credentials.json"))
os.environ.setdefault("PUBLIC_DIR", os.path.join(_TEST_HOME, "public"))
os.environ.setdefault("AUTH_SECRET", "test-secret-key-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.dependencies import (
    get_credential_store,
    get_max_upload_bytes,
    get_staging_dir,
    get_storage_root,
)
from app.main import app
from core.services.credential_service import CredentialStore
from core.services.file_ops_service import FileOpsService

TEST_SECRET = "test-secret-key-0123456789"
TEST_USERNAME = "admin"
TEST_PASSWORD = "correct horse battery staple"


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def storage_root(tmp_path):
    """Empty storage root for one test."""
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def staging_dir(tmp_path):
    """Staging folder outside the storage root."""
    staging = tmp_path / "staging"
    staging.mkdir()
    return staging


@pytest.fixture
def file_ops(storage_root):
    """FileOpsService with a 1 KiB upload cap."""
    return FileOpsService(storage_root, max_upload_bytes=1024)


@pytest.fixture
def sample_tree(storage_root):
    """
    Storage root with:
        a.txt      (10 bytes)
        .hidden
        b/c.txt    (3 bytes)
    """
    (storage_root / "a.txt").write_bytes(b"0123456789")
    (storage_root / ".hidden").write_bytes(b"secret")
    (storage_root / "b").mkdir()
    (storage_root / "b" / "c.txt").write_bytes(b"abc")
    return storage_root


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def credential_store(tmp_path):
    """Unconfigured credential store."""
    return CredentialStore(tmp_path / "credentials.json", secret=TEST_SECRET)


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def client(storage_root, staging_dir, credential_store):
    """API client with storage and credentials bound to this test's temp dir."""
    app.dependency_overrides[get_storage_root] = lambda: storage_root
    app.dependency_overrides[get_staging_dir] = lambda: staging_dir
    app.dependency_overrides[get_credential_store] = lambda: credential_store
    app.dependency_overrides[get_max_upload_bytes] = lambda: 1024 * 1024

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(credential_store):
    """Authorization header for a freshly set-up admin."""
    token = credential_store.setup(TEST_USERNAME, TEST_PASSWORD)
    return {"Authorization": f"Bearer {token}"}
