"""
Network discovery methods for TV devices

SSDP multicast search (with descriptor fetch) and a bounded-concurrency
subnet sweep that probes Roku ECP device-info.
"""

import socket
import asyncio
import aiohttp
import ipaddress
import logging
import xml.etree.ElementTree as ET
from typing import AsyncIterator, Dict, List, Optional, Tuple

from http_helper import create_device_session, create_probe_session
from remote.models import Device, Vendor
from remote.roku import parse_device_info, device_name_from_info

logger = logging.getLogger(__name__)


def parse_ssdp_response(data: bytes) -> Dict[str, str]:
    """Parse an SSDP/HTTPU response into upper-cased header names"""
    headers = {}
    text = data.decode('utf-8', errors='ignore')
    for line in text.split('\r\n' if '\r\n' in text else '\n')[1:]:
        if ':' in line:
            name, value = line.split(':', 1)
            headers[name.strip().upper()] = value.strip()
    return headers


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def parse_device_descriptor(xml_text: str) -> Dict[str, Optional[str]]:
    """Pull friendlyName/modelName/serialNumber out of a UPnP device descriptor"""
    root = ET.fromstring(xml_text)
    fields = {'friendlyName': None, 'modelName': None, 'serialNumber': None}
    device = next((el for el in root.iter() if _local_name(el.tag) == 'device'), None)
    if device is None:
        return fields
    for child in device:
        name = _local_name(child.tag)
        if name in fields and fields[name] is None and child.text:
            fields[name] = child.text.strip()
    return fields


def sweep_base(ip: Optional[str], default: str = "192.168.0") -> str:
    """Derive the /24 base ("192.168.1") from an address or base, else the default"""
    if not ip:
        return default
    parts = str(ip).strip().split('.')
    if len(parts) < 3:
        return default
    base = '.'.join(parts[:3])
    try:
        ipaddress.IPv4Address(f"{base}.0")
    except ValueError:
        return default
    return base


class NetworkDiscovery:
    """Handles SSDP multicast search and subnet sweep probing"""
    
    def __init__(self, config: dict, roku_port: int = 8060):
        self.ssdp_timeout = config.get('ssdp_timeout_seconds', 3)
        self.search_target = config.get('ssdp_search_target', 'roku:ecp')
        self.multicast_address = config.get('ssdp_multicast_address', '239.255.255.250')
        self.ssdp_port = config.get('ssdp_port', 1900)
        self.request_timeout = config.get('request_timeout', 5)
        self.descriptor_grace = config.get('ssdp_descriptor_grace_seconds', 0.5)
        self.probe_timeout = config.get('probe_timeout_seconds', 1)
        self.max_concurrent_probes = config.get('max_concurrent_probes', 10)
        self.first_host = config.get('sweep_first_host', 1)
        self.last_host = config.get('sweep_last_host', 10)
        self.roku_port = roku_port

    # ================== SSDP ==================

    def _search_message(self) -> bytes:
        return (
            "M-SEARCH * HTTP/1.1\r\n"
            f"HOST: {self.multicast_address}:{self.ssdp_port}\r\n"
            "MAN: \"ssdp:discover\"\r\n"
            f"ST: {self.search_target}\r\n"
            "MX: 3\r\n"
            "\r\n"
        ).encode('utf-8')

    async def _ssdp_responses(self) -> AsyncIterator[Tuple[bytes, str]]:
        """Send one M-SEARCH and yield (datagram, sender_ip) until the window closes"""
        loop = asyncio.get_running_loop()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
            sock.bind(('', 0))
            sock.setblocking(False)
            
            logger.info(f"Sending SSDP M-SEARCH for {self.search_target}...")
            await loop.sock_sendto(sock, self._search_message(), (self.multicast_address, self.ssdp_port))
            
            deadline = loop.time() + self.ssdp_timeout
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                try:
                    data, addr = await asyncio.wait_for(loop.sock_recvfrom(sock, 2048), remaining)
                except asyncio.TimeoutError:
                    break
                yield data, addr[0]
        finally:
            sock.close()

    async def _fetch_descriptor(self, location: str) -> str:
        async with create_device_session(self.request_timeout) as session:
            async with session.get(location) as response:
                body = await response.read()
        return body.decode('utf-8', errors='replace')

    async def _describe_responder(self, ip: str, location: str) -> Optional[Device]:
        try:
            fields = parse_device_descriptor(await self._fetch_descriptor(location))
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ET.ParseError) as e:
            logger.warning(f"Error parsing device info from {location}: {e}")
            return None
        return Device(
            ip=ip,
            name=fields['friendlyName'] or 'Roku Device',
            model=fields['modelName'] or 'Unknown',
            vendor=Vendor.ROKU,
            serial=fields['serialNumber'] or 'Unknown',
        )

    async def ssdp_discovery(self) -> List[Device]:
        """
        SSDP search for Roku ECP devices
        One descriptor fetch per IP at a time; a later response from the same
        IP is only used when the earlier fetch failed. Whatever has been
        described shortly after the window closes is returned, in response order
        """
        tasks: Dict[str, asyncio.Task] = {}

        try:
            async for data, sender_ip in self._ssdp_responses():
                headers = parse_ssdp_response(data)
                if 'roku' not in headers.get('ST', '').lower():
                    continue
                location = headers.get('LOCATION')
                if not location:
                    continue
                previous = tasks.get(sender_ip)
                if previous is not None and (not previous.done() or previous.result() is not None):
                    continue
                # Re-insert so a retried IP keeps the position of the response that described it
                tasks.pop(sender_ip, None)
                tasks[sender_ip] = asyncio.create_task(self._describe_responder(sender_ip, location))
        except OSError as e:
            logger.error(f"SSDP discovery failed: {e}")

        # Fetches still in flight get a short grace period past the search window
        if tasks:
            await asyncio.wait(list(tasks.values()), timeout=self.descriptor_grace)

        devices = []
        for task in tasks.values():
            if not task.done():
                task.cancel()
                continue
            device = task.result()
            if device:
                devices.append(device)
                logger.info(f"Found device via SSDP: {device.name} ({device.ip})")
        return devices

    # ================== SUBNET SWEEP ==================

    def generate_sweep_ips(self, base: str) -> List[str]:
        return [f"{base}.{host}" for host in range(self.first_host, self.last_host + 1)]

    async def _probe_roku(self, session: aiohttp.ClientSession, ip: str) -> Optional[Device]:
        """Roku device-info probe; anything but a timely 2xx is a miss"""
        url = f"http://{ip}:{self.roku_port}/query/device-info"
        
        async def fetch():
            async with session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    return None
                return (await response.read()).decode('utf-8', errors='replace')

        try:
            body = await asyncio.wait_for(fetch(), self.probe_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.debug(f"Probe miss for {ip}: {e!r}")
            return None
        if body is None:
            return None
        
        try:
            info = parse_device_info(body)
            name = device_name_from_info(info) if info else f"Roku at {ip}"
            model = info.get('model-name') or 'Unknown'
            serial = info.get('serial-number') or None
        except ET.ParseError:
            name, model, serial = f"Roku at {ip}", 'Unknown', None
        return Device(ip=ip, name=name, model=model, vendor=Vendor.ROKU, serial=serial)

    async def subnet_sweep(self, ip_list: List[str]) -> List[Device]:
        """Probe every IP concurrently (bounded); results keep ip_list order"""
        semaphore = asyncio.Semaphore(self.max_concurrent_probes)
        
        async with create_probe_session(self.probe_timeout) as session:
            async def scan_single_ip(ip: str):
                async with semaphore:
                    return await self._probe_roku(session, ip)
            
            results = await asyncio.gather(*(scan_single_ip(ip) for ip in ip_list))
        
        devices = [device for device in results if device]
        for device in devices:
            logger.info(f"Found device via sweep: {device.name} ({device.ip})")
        return devices
