"""Health check endpoints."""

from fastapi import APIRouter, Depends

from bridgeroute import __version__
from bridgeroute.config import get_settings
from bridgeroute.web.controllers.bridge import get_bridge_service
from bridgeroute.web.services.bridge_service import BridgeWebService

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness only; never touches the aggregator."""
    return {"status": "healthy", "service": "bridgeroute"}


@router.get("/health/detailed")
async def detailed_health(service: BridgeWebService = Depends(get_bridge_service)):
    """Configuration plus which chain catalog is being served.

    ``chain_source`` is "live", "static" (aggregator was unreachable when
    the catalog was chosen), or null before the first chain lookup. A
    static catalog reports the service as degraded.
    """
    source = service.bridge.chain_source
    return {
        "status": "degraded" if source == "static" else "healthy",
        "service": "bridgeroute",
        "version": __version__,
        "chain_source": source,
        "config": get_settings().get_safe_dict(),
    }
