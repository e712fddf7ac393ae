"""
Discovery data structures and models
"""

from typing import List, Dict, Any
from dataclasses import dataclass

from remote.models import Device

@dataclass
class DiscoveryResult:
    """Results from one discovery run; transient, never persisted"""
    devices: List[Device]
    method: str  # "ssdp", "sweep", "combined"
    duration_seconds: float
    devices_tested: int
    success_count: int

    def to_dict(self, saved_ips=()) -> Dict[str, Any]:
        return {
            "devices": [dict(d.to_dict(), saved=d.ip in saved_ips) for d in self.devices],
            "method": self.method,
            "duration_seconds": round(self.duration_seconds, 3),
            "devices_tested": self.devices_tested,
        }
