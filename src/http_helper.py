# HTTP Helper for TV Connections
# Session configuration for LAN TV endpoints (Roku ECP, Samsung info API)

import aiohttp
import logging

logger = logging.getLogger(__name__)

def create_device_session(timeout_seconds: float = 5) -> aiohttp.ClientSession:
    """
    Create properly configured aiohttp session for local TV connections (always HTTP)
    Prevents connection leaks with proper cleanup and limits
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=2,           # Max 2 connections per TV IP
        ssl=False,                  # Local TVs are plain HTTP / ws
        force_close=True,           # Force connection cleanup
        enable_cleanup_closed=True  # Additional cleanup
    )
    
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )

def create_probe_session(timeout_seconds: float = 1) -> aiohttp.ClientSession:
    """
    Create a session for discovery probes
    The total timeout aborts the request, so one silent host cannot stall a sweep
    """
    connector = aiohttp.TCPConnector(
        limit=0,                    # Concurrency is bounded by the caller
        ssl=False,
        force_close=True,
        enable_cleanup_closed=True
    )
    
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )
