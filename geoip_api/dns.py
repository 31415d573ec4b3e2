import ipaddress
import logging
import socket
from typing import List, Optional

log = logging.getLogger(__name__)


class ResolutionError(Exception):
    def __init__(self, identifier: str, reason: str = "no address"):
        super().__init__(f"Could not resolve '{identifier}': {reason}")
        self.identifier = identifier
        self.reason = reason


def _norm_ip(s: str) -> str:
    # fe80::1%eth0 -> fe80::1
    addr = ipaddress.ip_address(s.split("%", 1)[0])
    # ::ffff:1.2.3.4 остаётся в точечной записи, а не ::ffff:102:304
    if getattr(addr, "ipv4_mapped", None) is not None:
        return f"::ffff:{addr.ipv4_mapped}"
    return str(addr)


def same_address(a: str, b: str) -> bool:
    try:
        return ipaddress.ip_address(a.split("%", 1)[0]) == ipaddress.ip_address(b.split("%", 1)[0])
    except ValueError:
        return False


class SystemDns:
    """Blocking resolution through the system resolver (getaddrinfo / getnameinfo)."""

    def forward(self, host: str) -> List[str]:
        # литералы тоже идут через getaddrinfo, чтобы путь был один
        try:
            infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
        except (socket.gaierror, UnicodeError) as e:
            raise ResolutionError(host, str(e)) from e

        addrs: List[str] = []
        for _family, _type, _proto, _canon, sockaddr in infos:
            ip = _norm_ip(sockaddr[0])
            if ip not in addrs:
                addrs.append(ip)
        return addrs

    def reverse(self, ip: str) -> Optional[str]:
        try:
            # NI_NAMEREQD: без PTR-записи ошибка, а не числовой адрес
            name, _port = socket.getnameinfo((ip, 0), socket.NI_NAMEREQD)
        except (socket.gaierror, socket.herror, OSError) as e:
            log.debug("PTR lookup failed for %s: %s", ip, e)
            return None
        if not name or same_address(name, ip):
            return None
        return name
