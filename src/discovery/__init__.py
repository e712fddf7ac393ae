"""
Discovery module for TV device discovery
"""

from .manager import TVDiscovery, merge_devices
from .models import DiscoveryResult
from .network_discovery import NetworkDiscovery

__all__ = ['TVDiscovery', 'DiscoveryResult', 'NetworkDiscovery', 'merge_devices']
