# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# - health.py: Liveness and readiness checks
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health

__all__ = ["health"]
