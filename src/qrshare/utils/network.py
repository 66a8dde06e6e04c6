"""Local network address helpers."""

from __future__ import annotations

import logging
import socket
from urllib.parse import quote

logger = logging.getLogger(__name__)

LOOPBACK = "127.0.0.1"

# Any routable address works; connect() on a UDP socket sends nothing.
_PROBE_ADDRESS = ("10.255.255.255", 1)


def _is_usable(ip: str) -> bool:
    return not ip.startswith("127.") and not ip.startswith("169.254.")


def get_local_ip() -> str:
    """Return a non-loopback IPv4 address other devices can reach us on.

    Falls back to the host name's addresses, then to 127.0.0.1.
    """
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            s.connect(_PROBE_ADDRESS)
            ip = s.getsockname()[0]
        finally:
            s.close()
        if _is_usable(ip):
            return ip
    except OSError as e:
        logger.debug("UDP address probe failed: %s", e)

    try:
        _, _, addresses = socket.gethostbyname_ex(socket.gethostname())
    except OSError as e:
        logger.debug("Host name lookup failed: %s", e)
        addresses = []
    for ip in addresses:
        if _is_usable(ip):
            return ip

    logger.warning("No LAN address found, falling back to %s", LOOPBACK)
    return LOOPBACK


def build_share_url(host: str, port: int, file_name: str, scheme: str = "http") -> str:
    """Build the download URL for ``file_name`` served at host:port."""
    return f"{scheme}://{host}:{port}/{quote(file_name, safe='')}"
