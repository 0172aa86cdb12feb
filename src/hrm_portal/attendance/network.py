"""Office network restriction for check-in/check-out."""
from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, Mapping, Optional

logger = logging.getLogger(__name__)


def client_ip(headers: Mapping[str, str], remote_addr: Optional[str]) -> str:
    """Best guess at the caller's address behind a reverse proxy."""
    forwarded = (headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    if forwarded:
        return forwarded
    real_ip = (headers.get("X-Real-IP") or "").strip()
    if real_ip:
        return real_ip
    return remote_addr or ""


class OfficeNetworkPolicy:
    def __init__(self, *, enabled: bool = False, allowed_ips: Iterable[str] = (), allowed_subnets: Iterable[str] = ()):
        self.enabled = bool(enabled)
        self._ips = {ip.strip() for ip in allowed_ips if ip and ip.strip()}
        self._networks = [ipaddress.ip_network(s.strip(), strict=False) for s in allowed_subnets if s and s.strip()]

    def is_allowed(self, ip: str) -> bool:
        if not self.enabled:
            return True
        if ip in self._ips:
            return True
        try:
            addr = ipaddress.ip_address(ip)
        except ValueError:
            logger.warning("Refused attendance from unparsable address %r", ip)
            return False
        if any(addr.version == net.version and addr in net for net in self._networks):
            return True
        logger.warning("Refused attendance from %s: outside the office network", ip)
        return False
