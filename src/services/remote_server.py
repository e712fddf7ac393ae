"""
Remote Server - Main orchestrator wiring registry, discovery, adapters and API
"""

import socket
import logging
from typing import Dict, Optional
import uvicorn

# Local imports
from config_loader import load_config, setup_logging
from registry.manager import DeviceRegistry
from discovery.manager import TVDiscovery
from remote import create_adapters
from api.main_api import RemoteAPI
from services.dispatcher import CommandDispatcher, SessionStore

logger = logging.getLogger(__name__)


def get_local_ip() -> str:
    """First non-loopback IPv4 address of this host, for the startup banner"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No packet is sent; connect() only selects the outgoing interface
        sock.connect(("10.255.255.255", 1))
        return sock.getsockname()[0]
    except OSError:
        return "localhost"
    finally:
        sock.close()


def build_api(config: Dict) -> RemoteAPI:
    """Create every component from configuration and return the API holding them"""
    registry = DeviceRegistry(config)
    discovery = TVDiscovery(config, registry)
    adapters = create_adapters(config)
    sessions = SessionStore()
    dispatcher = CommandDispatcher(
        adapters,
        registry,
        connect_timeout=config['network'].get('request_timeout', 5)
    )
    return RemoteAPI(config, registry, discovery, adapters, sessions, dispatcher)


class RemoteServer:
    """Main server hosting the remote gateway API"""
    
    def __init__(self, config_path: str = "config/config.yaml", config: Optional[Dict] = None):
        # A caller passing config has already set up logging from it
        if config is None:
            config = load_config(config_path)
            setup_logging(config)
        self.config = config
        
        self.api = build_api(self.config)
        self._server: Optional[uvicorn.Server] = None
        
    async def start(self):
        """Start the HTTP API server"""
        api_config = self.config['api']
        host = api_config['host']
        port = api_config['port']
        
        local_ip = get_local_ip()
        logger.info("TV Remote Gateway is running")
        logger.info(f"Access from your phone at: http://{local_ip}:{port}")
        logger.info(f"Access from this machine at: http://localhost:{port}")
        logger.info("Make sure your phone is on the same Wi-Fi network as the TV")
        logger.info('Roku: enable Settings > System > Advanced system settings > "Control by mobile apps"')
        
        uvicorn_config = uvicorn.Config(
            self.api.app,
            host=host,
            port=port,
            log_level=self.config['logging']['level'].lower()
        )
        self._server = uvicorn.Server(uvicorn_config)
        await self._server.serve()
    
    async def stop(self):
        """Stop the API server gracefully"""
        logger.info("Stopping server...")
        if self._server:
            self._server.should_exit = True
        logger.info("Server stopped")
