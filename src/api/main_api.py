"""
Main FastAPI application setup

HTTP surface for the TV Remote Gateway: saved devices, discovery, direct
per-IP control, per-session dispatch and health.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from typing import Dict
import logging

from remote.errors import RemoteControlError

# Import modular route factories
from .control_routes import create_control_routes
from .device_routes import create_device_routes
from .session_routes import create_session_routes
from .system_routes import create_system_routes

logger = logging.getLogger(__name__)


class RemoteAPI:
    """Local HTTP API for TV remote control"""
    
    def __init__(self, config: Dict, registry, discovery, adapters, sessions, dispatcher):
        self.config = config
        self.registry = registry
        self.discovery = discovery
        self.adapters = adapters
        self.sessions = sessions
        self.dispatcher = dispatcher
        self.app = FastAPI(
            title="TV Remote Gateway",
            description="Forward remote control commands to Roku, Samsung and Google TVs on the LAN",
            version="1.0.0"
        )
        self._setup_middleware()
        self._setup_error_handlers()
        self._setup_routes()
        self._setup_static()
    
    def _setup_middleware(self):
        origins = self.config.get('api', {}).get('cors_origins', ['*'])
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    
    def _setup_error_handlers(self):
        @self.app.exception_handler(RemoteControlError)
        async def remote_error_handler(request: Request, exc: RemoteControlError):
            logger.warning(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
    
    def _setup_routes(self):
        """Setup FastAPI routes using modular approach"""
        self.app.include_router(create_device_routes(self.registry, self.discovery))
        self.app.include_router(create_control_routes(self.adapters))
        self.app.include_router(create_session_routes(self.sessions, self.dispatcher))
        self.app.include_router(create_system_routes(self.registry, self.sessions))
    
    def _setup_static(self):
        """Serve the browser remote UI when its directory exists"""
        static_dir = self.config.get('api', {}).get('static_dir')
        if static_dir and Path(static_dir).is_dir():
            self.app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
            logger.info(f"Serving UI from {static_dir}")
