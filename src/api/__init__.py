"""
API module for TV remote control
"""

from .main_api import RemoteAPI
from .control_routes import create_control_routes
from .device_routes import create_device_routes
from .session_routes import create_session_routes
from .system_routes import create_system_routes

__all__ = ['RemoteAPI', 'create_control_routes', 'create_device_routes',
           'create_session_routes', 'create_system_routes']
