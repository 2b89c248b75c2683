# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - dependencies.py: Wiring settings into services for Depends()
# - exceptions.py: Typed errors and their HTTP mapping
# - auth/: Admin setup, login and bearer-token checks
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# filesystem work to the core/ package.
# =============================================================================
