"""Web services for read-only bridge operations."""

from bridgeroute.web.services.bridge_service import BridgeWebService

__all__ = ["BridgeWebService"]
