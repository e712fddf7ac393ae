"""
Main discovery manager combining SSDP search and subnet sweep strategies
"""

import asyncio
import logging
import time
from typing import List, Dict, Optional, Set

from remote.models import Device
from .models import DiscoveryResult
from .network_discovery import NetworkDiscovery, sweep_base

logger = logging.getLogger(__name__)

STRATEGIES = ("ssdp", "sweep", "combined")


def merge_devices(*device_lists: List[Device]) -> List[Device]:
    """Concatenate candidate lists keeping the first device seen for each IP"""
    merged: Dict[str, Device] = {}
    for devices in device_lists:
        for device in devices:
            if device.ip not in merged:
                merged[device.ip] = device
    return list(merged.values())


class TVDiscovery:
    """Discovery service for TVs on the local network"""
    
    def __init__(self, config: Dict, registry=None):
        network_config = config.get('network', {})
        self.registry = registry  # Consulted for the sweep base and saved flags
        self.default_base = network_config.get('sweep_default_base', '192.168.0')
        self.network = NetworkDiscovery(network_config, roku_port=config.get('roku', {}).get('port', 8060))
    
    async def discover(self, strategy: str = "ssdp", base: Optional[str] = None) -> DiscoveryResult:
        if strategy == "ssdp":
            return await self.discover_ssdp()
        if strategy == "sweep":
            return await self.discover_sweep(base)
        if strategy == "combined":
            return await self.discover_combined(base)
        raise ValueError(f"Unknown discovery strategy: {strategy}")
    
    async def discover_ssdp(self) -> DiscoveryResult:
        """SSDP multicast search; an empty result means none found yet, not none exist"""
        logger.info("[SEARCH] Starting SSDP discovery...")
        start_time = time.time()
        devices = await self.network.ssdp_discovery()
        duration = time.time() - start_time
        logger.info(f"[PASS] SSDP discovery complete: {len(devices)} devices in {duration:.1f}s")
        return DiscoveryResult(devices, "ssdp", duration, len(devices), len(devices))
    
    async def resolve_sweep_base(self, base: Optional[str] = None) -> str:
        """Explicit base, else the /24 of the last used saved device, else the default"""
        if base:
            return sweep_base(base, self.default_base)
        if self.registry:
            recent = await self.registry.most_recent()
            if recent:
                return sweep_base(recent.ip, self.default_base)
        return self.default_base
    
    async def discover_sweep(self, base: Optional[str] = None) -> DiscoveryResult:
        """Probe a handful of hosts on the /24 for Roku ECP"""
        resolved = await self.resolve_sweep_base(base)
        ip_list = self.network.generate_sweep_ips(resolved)
        logger.info(f"[SEARCH] Sweeping {len(ip_list)} addresses on {resolved}.0/24...")
        start_time = time.time()
        devices = await self.network.subnet_sweep(ip_list)
        duration = time.time() - start_time
        logger.info(f"[PASS] Sweep complete: {len(devices)} devices scanning {len(ip_list)} IPs in {duration:.1f}s")
        return DiscoveryResult(devices, "sweep", duration, len(ip_list), len(devices))
    
    async def discover_combined(self, base: Optional[str] = None) -> DiscoveryResult:
        """Run both strategies concurrently; SSDP candidates win on duplicate IPs"""
        start_time = time.time()
        ssdp_result, sweep_result = await asyncio.gather(
            self.discover_ssdp(),
            self.discover_sweep(base),
        )
        devices = merge_devices(ssdp_result.devices, sweep_result.devices)
        duration = time.time() - start_time
        return DiscoveryResult(
            devices=devices,
            method="combined",
            duration_seconds=duration,
            devices_tested=ssdp_result.devices_tested + sweep_result.devices_tested,
            success_count=len(devices)
        )
    
    async def saved_ips(self) -> Set[str]:
        if not self.registry:
            return set()
        return {device.ip for device in await self.registry.list_devices()}
