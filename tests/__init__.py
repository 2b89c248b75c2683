# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the FileDrop API:
# - test_paths.py: Path sanitizing and root confinement
# - test_tree_service.py: Storage tree listing
# - test_archive_service.py: Streaming zip archives
# - test_file_ops_service.py: Upload placement, delete, folders, move
# - test_credential_service.py: Admin credentials and bearer tokens
# - test_api.py: HTTP endpoints end to end
#
# Run tests with: pytest
# =============================================================================
