"""
System health API routes
"""

from fastapi import APIRouter
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def create_system_routes(registry, sessions):
    """Create system monitoring routes"""
    router = APIRouter(prefix="/api", tags=["system"])
    
    @router.get("/system/health")
    async def system_health():
        """System health check"""
        try:
            devices = await registry.list_devices()
            return {
                "status": "healthy",
                "saved_devices": len(devices),
                "active_sessions": len(sessions),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
    
    return router
