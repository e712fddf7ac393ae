"""
Session API routes - per-client connection state through the command dispatcher
"""

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel
from typing import Optional
import logging

from remote.errors import NotConnected

logger = logging.getLogger(__name__)

# Request models
class ConnectRequest(BaseModel):
    ip: Optional[str] = None
    vendor: str = "roku"
    token: Optional[str] = None

class LaunchByNameRequest(BaseModel):
    name: str


def create_session_routes(sessions, dispatcher):
    """Create session lifecycle and command routes"""
    router = APIRouter(prefix="/api/sessions", tags=["sessions"])
    
    def existing_session(session_id: str):
        """Commands never open a session; an unknown id is simply not connected"""
        session = sessions.get(session_id)
        if session is None:
            raise NotConnected("Not connected to a TV", hint="Connect to a TV first")
        return session
    
    @router.post("")
    async def create_session():
        """Open a new client session"""
        return sessions.create().to_dict()
    
    @router.get("/{session_id}")
    async def get_session(session_id: str):
        session = sessions.get(session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        return session.to_dict()
    
    @router.delete("/{session_id}")
    async def close_session(session_id: str):
        session = sessions.get(session_id)
        if session:
            dispatcher.disconnect(session)
        sessions.discard(session_id)
        return {"success": True}
    
    @router.post("/{session_id}/connect")
    async def connect(session_id: str, request: ConnectRequest):
        """Probe the TV and make it this session's active connection"""
        is_new = sessions.get(session_id) is None
        session = sessions.get_or_create(session_id)
        try:
            await dispatcher.connect(session, request.ip, request.vendor, token=request.token)
        except Exception:
            # A failed first connect leaves nothing behind
            if is_new:
                sessions.discard(session_id)
            raise
        return session.to_dict()
    
    @router.post("/{session_id}/disconnect")
    async def disconnect(session_id: str):
        session = sessions.get(session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        dispatcher.disconnect(session)
        return session.to_dict()
    
    @router.post("/{session_id}/actions/{action}")
    async def send_action(session_id: str, action: str):
        await dispatcher.send_action(existing_session(session_id), action)
        return {"success": True, "action": action}
    
    @router.post("/{session_id}/actions/{action}/down")
    async def action_down(session_id: str, action: str):
        await dispatcher.key_down(existing_session(session_id), action)
        return {"success": True, "action": action}
    
    @router.post("/{session_id}/actions/{action}/up")
    async def action_up(session_id: str, action: str):
        await dispatcher.key_up(existing_session(session_id), action)
        return {"success": True, "action": action}
    
    @router.get("/{session_id}/apps")
    async def list_apps(session_id: str):
        apps = await dispatcher.list_apps(existing_session(session_id))
        return {"apps": [app.to_dict() for app in apps]}
    
    @router.post("/{session_id}/launch/{app_id}")
    async def launch(session_id: str, app_id: str):
        await dispatcher.launch(existing_session(session_id), app_id)
        return {"success": True, "appId": app_id}
    
    @router.post("/{session_id}/launch-by-name")
    async def launch_by_name(session_id: str, request: LaunchByNameRequest):
        app = await dispatcher.launch_app_by_name(existing_session(session_id), request.name)
        return {"success": True, "appId": app.id, "name": app.name}
    
    @router.post("/{session_id}/search")
    async def search(session_id: str, keyword: str = Body("", embed=True)):
        await dispatcher.search(existing_session(session_id), keyword)
        return {"success": True, "keyword": keyword}
    
    @router.post("/{session_id}/input")
    async def input_text(session_id: str, text: str = Body("", embed=True)):
        await dispatcher.input_text(existing_session(session_id), text)
        return {"success": True, "text": text}
    
    return router
