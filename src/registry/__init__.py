"""
Registry module for saved TV devices
"""

from .manager import DeviceRegistry

__all__ = ['DeviceRegistry']
