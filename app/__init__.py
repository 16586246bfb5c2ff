# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the web application and its startup gate:
# - config.py: Environment validation and the typed settings object
# - exceptions.py: HTTP error kinds and exception handlers
# - main.py: App factory and entry point
# - routers/: API endpoint definitions
# =============================================================================

__version__ = "1.0.0"
