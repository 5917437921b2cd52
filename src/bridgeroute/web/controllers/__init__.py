"""HTTP controllers for web API endpoints.

These controllers MUST NOT sign or broadcast transactions. They return
route information and unsigned steps for client-side signing.
"""

from bridgeroute.web.controllers.bridge import router as bridge_router

__all__ = [
    "bridge_router",
]
