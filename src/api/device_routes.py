"""
Saved-device registry and discovery API routes
"""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel
from typing import Optional
import logging

from discovery.manager import STRATEGIES
from remote.models import Device, parse_vendor

logger = logging.getLogger(__name__)

# Request models
class SavedDeviceRequest(BaseModel):
    ip: Optional[str] = None
    name: Optional[str] = None
    model: Optional[str] = None
    vendor: Optional[str] = None
    serial: Optional[str] = None

class RenameRequest(BaseModel):
    name: str


def create_device_routes(registry, discovery):
    """Create saved-device and discovery routes"""
    router = APIRouter(prefix="/api", tags=["devices"])
    
    @router.get("/saved-devices")
    async def list_saved_devices():
        """List saved devices"""
        devices = await registry.list_devices()
        return {"devices": [d.to_dict() for d in devices]}
    
    @router.post("/saved-devices")
    async def save_device(request: SavedDeviceRequest):
        """Add or update a saved device (upsert by IP)"""
        device = Device(
            ip=request.ip,
            name=request.name or "Roku Device",
            model=request.model or "Unknown",
            vendor=parse_vendor(request.vendor or "roku"),
            serial=request.serial,
        )
        try:
            device = await registry.upsert(device)
        except OSError as e:
            raise HTTPException(status_code=500, detail=f"Error saving devices: {e}")
        return {"success": True, "device": device.to_dict()}
    
    @router.put("/saved-devices/{ip}")
    async def rename_device(ip: str, request: RenameRequest):
        """Rename a saved device"""
        try:
            device = await registry.rename(ip, request.name)
        except OSError as e:
            raise HTTPException(status_code=500, detail=f"Error saving devices: {e}")
        if not device:
            raise HTTPException(status_code=404, detail="Device not found")
        return {"success": True, "device": device.to_dict()}
    
    @router.delete("/saved-devices/{ip}")
    async def delete_device(ip: str):
        """Remove a saved device; unknown IPs succeed too"""
        try:
            await registry.remove(ip)
        except OSError as e:
            raise HTTPException(status_code=500, detail=f"Error saving devices: {e}")
        return {"success": True}
    
    @router.get("/discover")
    async def discover_devices(strategy: str = Query("ssdp"), base: Optional[str] = None):
        """Discover TVs on the LAN (SSDP takes ~3s)"""
        if strategy not in STRATEGIES:
            raise HTTPException(status_code=400, detail=f"Unknown strategy '{strategy}', expected one of {list(STRATEGIES)}")
        result = await discovery.discover(strategy, base)
        return result.to_dict(await discovery.saved_ips())
    
    @router.get("/discover/sweep")
    async def sweep_subnet(base: Optional[str] = None):
        """Probe the first hosts of a /24 for Roku devices"""
        result = await discovery.discover_sweep(base)
        return result.to_dict(await discovery.saved_ips())
    
    return router
