# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the storage logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: tree listing, zip streaming, file operations, credentials
#
# Services take the storage root (and any settings they need) as arguments
# instead of reading app.config, so they can be tested against a temp dir.
# =============================================================================
