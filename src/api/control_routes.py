"""
Direct TV control API routes (target TV given by ?ip=)
"""

from fastapi import APIRouter, Body, Request
from fastapi.responses import Response
from typing import Optional
import logging

from remote.google_tv import google_tv_not_implemented
from remote.keymaps import resolve_key
from remote.models import Vendor, validate_ip

logger = logging.getLogger(__name__)


def create_control_routes(adapters):
    """Create Roku, Samsung and Google TV control routes"""
    router = APIRouter(prefix="/api", tags=["control"])
    roku = adapters[Vendor.ROKU]
    samsung = adapters[Vendor.SAMSUNG]
    
    # === ROKU (ECP) ===
    
    @router.get("/device-info")
    async def get_device_info(ip: Optional[str] = None):
        """Roku device info as a flat record"""
        return await roku.device_info(validate_ip(ip))
    
    @router.get("/apps")
    async def get_apps(ip: Optional[str] = None):
        """Installed Roku apps"""
        apps = await roku.list_apps(validate_ip(ip))
        return {"apps": [app.to_dict() for app in apps]}
    
    @router.get("/app-icon/{app_id}")
    async def get_app_icon(app_id: str, ip: Optional[str] = None):
        """App icon bytes with the content type the TV supplied"""
        body, content_type = await roku.app_icon(validate_ip(ip), app_id)
        return Response(content=body, media_type=content_type)
    
    @router.post("/keypress/{key}")
    async def send_keypress(key: str, ip: Optional[str] = None):
        ip = validate_ip(ip)
        await roku.keypress(ip, resolve_key(Vendor.ROKU, key))
        return {"success": True, "key": key}
    
    @router.post("/keydown/{key}")
    async def send_keydown(key: str, ip: Optional[str] = None):
        ip = validate_ip(ip)
        await roku.key_down(ip, resolve_key(Vendor.ROKU, key))
        return {"success": True, "key": key}
    
    @router.post("/keyup/{key}")
    async def send_keyup(key: str, ip: Optional[str] = None):
        ip = validate_ip(ip)
        await roku.key_up(ip, resolve_key(Vendor.ROKU, key))
        return {"success": True, "key": key}
    
    @router.post("/launch/{app_id}")
    async def launch_app(app_id: str, ip: Optional[str] = None):
        await roku.launch(validate_ip(ip), app_id)
        return {"success": True, "appId": app_id}
    
    @router.post("/search")
    async def search(ip: Optional[str] = None, keyword: str = Body("", embed=True)):
        await roku.search(validate_ip(ip), keyword)
        return {"success": True, "keyword": keyword}
    
    @router.post("/input")
    async def send_text(ip: Optional[str] = None, text: str = Body("", embed=True)):
        """Type text character by character"""
        await roku.input_text(validate_ip(ip), text)
        return {"success": True, "text": text}
    
    # === SAMSUNG (WebSocket) ===
    
    @router.post("/samsung/keypress/{key}")
    async def samsung_keypress(key: str, ip: Optional[str] = None, token: Optional[str] = None):
        ip = validate_ip(ip)
        await samsung.keypress(ip, resolve_key(Vendor.SAMSUNG, key), token=token or None)
        return {"success": True, "key": key, "platform": "samsung"}
    
    @router.get("/samsung/device-info")
    async def samsung_device_info(ip: Optional[str] = None):
        return await samsung.device_info(validate_ip(ip))
    
    # === GOOGLE TV (not implemented) ===
    
    @router.get("/google/discover")
    async def google_discover():
        raise google_tv_not_implemented("Google TV discovery")
    
    @router.api_route("/google/{path:path}", methods=["GET", "POST"])
    async def google_tv(path: str, request: Request):
        logger.info(f"Google TV request for /{path} from {request.client.host if request.client else 'unknown'}")
        raise google_tv_not_implemented()
    
    return router
