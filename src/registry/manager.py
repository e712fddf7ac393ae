"""
Saved-device registry backed by a single JSON file
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import List, Dict, Optional

from remote.models import Device, validate_ip

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """
    Persists the list of remembered TVs, keyed by IP.

    The whole file is rewritten on every mutation. File I/O runs in a worker
    thread; mutations hold one lock across the read-modify-write so
    concurrent sessions cannot lose each other's updates.
    """

    def __init__(self, config: Dict):
        registry_config = config.get('registry', {})
        self.path = Path(registry_config.get('file', 'saved_devices.json'))
        self._lock = asyncio.Lock()

    # ================== FILE ACCESS ==================

    def _load(self) -> List[Device]:
        """Read the registry; a missing or corrupt file reads as empty"""
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            return [Device.from_dict(item) for item in raw]
        except Exception as e:
            logger.error(f"Error loading saved devices from {self.path}: {e}")
            return []

    def _save(self, devices: List[Device]) -> None:
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump([d.to_dict() for d in devices], f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error saving devices to {self.path}: {e}")
            raise

    # ================== QUERIES ==================

    async def list_devices(self) -> List[Device]:
        return await asyncio.to_thread(self._load)

    async def get(self, ip: str) -> Optional[Device]:
        for device in await asyncio.to_thread(self._load):
            if device.ip == ip:
                return device
        return None

    async def most_recent(self) -> Optional[Device]:
        """The device with the latest lastUsed timestamp"""
        devices = [d for d in await asyncio.to_thread(self._load) if d.last_used]
        if not devices:
            return None
        return max(devices, key=lambda d: d.last_used)

    # ================== MUTATIONS ==================

    async def upsert(self, device: Device) -> Device:
        """Add or replace the entry for device.ip, stamping lastUsed"""
        device.ip = validate_ip(device.ip)
        device.touch()
        async with self._lock:
            devices = await asyncio.to_thread(self._load)
            for index, existing in enumerate(devices):
                if existing.ip == device.ip:
                    devices[index] = device
                    break
            else:
                devices.append(device)
            await asyncio.to_thread(self._save, devices)
        logger.info(f"Saved device {device.name} ({device.ip})")
        return device

    async def rename(self, ip: str, name: str) -> Optional[Device]:
        """Rename a saved device; None (and no write) when the IP is unknown"""
        async with self._lock:
            devices = await asyncio.to_thread(self._load)
            device = next((d for d in devices if d.ip == ip), None)
            if device is None:
                return None
            device.name = name
            device.touch()
            await asyncio.to_thread(self._save, devices)
        logger.info(f"Renamed device {ip} to {name}")
        return device

    async def remove(self, ip: str) -> bool:
        """Delete a saved device; removing an unknown IP is not an error"""
        async with self._lock:
            devices = await asyncio.to_thread(self._load)
            remaining = [d for d in devices if d.ip != ip]
            removed = len(remaining) != len(devices)
            await asyncio.to_thread(self._save, remaining)
        if removed:
            logger.info(f"Removed saved device {ip}")
        return removed
