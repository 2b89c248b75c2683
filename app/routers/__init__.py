# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - files.py: Listing, upload, delete, folders, move, zip
# - downloads.py: Authenticated single-file downloads under /uploads
#
# Each router is mounted in main.py.
# =============================================================================

from . import health
from . import files
from . import downloads

__all__ = [
    "health",
    "files",
    "downloads",
]
