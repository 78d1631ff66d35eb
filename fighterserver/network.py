"""Listening socket setup and address helpers for the game server."""

from __future__ import annotations

import ipaddress
import socket
from enum import Enum, auto
from typing import Any, Optional

OPTION_NONBLOCKING = 0x01
INADDR_ANY = "0.0.0.0"


class ProtocolType(Enum):
    """Transport the listening socket uses."""

    TCP_IP = auto()
    UDP = auto()


def _host_text(host: Any) -> str:
    if isinstance(host, int) and not isinstance(host, bool):
        return str(ipaddress.IPv4Address(host))
    return str(host)


class SocketManager:
    """Owns the server's listening socket."""

    def __init__(self) -> None:
        self.listen_socket: Optional[socket.socket] = None

    def __enter__(self) -> "SocketManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    def start_server(
        self,
        protocol: ProtocolType,
        port: int,
        options: int = 0,
        host: Any = INADDR_ANY,
        backlog: int = socket.SOMAXCONN,
    ) -> socket.socket:
        """Create, bind and (for TCP) listen on a socket; return it."""
        if protocol is ProtocolType.TCP_IP:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        elif protocol is ProtocolType.UDP:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        else:
            raise ValueError(f"unsupported protocol {protocol!r}")

        try:
            sock.bind((_host_text(host), port))
            if options & OPTION_NONBLOCKING:
                sock.setblocking(False)
            if protocol is ProtocolType.TCP_IP:
                sock.listen(backlog)
        except OSError:
            sock.close()
            raise

        self.cleanup()
        self.listen_socket = sock
        return sock

    def accept(self) -> Optional[tuple[socket.socket, Any]]:
        """Accept one client; return (socket, address), or None if none is ready."""
        if self.listen_socket is None:
            raise RuntimeError("server is not started")
        try:
            return self.listen_socket.accept()
        except OSError:
            return None

    def cleanup(self) -> None:
        """Close the listening socket if one is open."""
        if self.listen_socket is not None:
            self.listen_socket.close()
            self.listen_socket = None


def format_ip(address: Any) -> str:
    """Return the dotted IPv4 text of an address tuple, packed bytes, int or string."""
    if isinstance(address, tuple):
        address = address[0]
    if isinstance(address, (bytes, bytearray)):
        if len(address) != 4:
            raise ValueError(f"packed IPv4 address needs 4 bytes, got {len(address)}")
        return socket.inet_ntoa(bytes(address))
    if isinstance(address, bool):
        raise ValueError(f"not an IPv4 address: {address!r}")
    if isinstance(address, (int, str)):
        return str(ipaddress.IPv4Address(address))
    raise ValueError(f"not an IPv4 address: {address!r}")


def format_port(address: Any) -> int:
    """Return the host-order port of an address tuple, 2 wire bytes or a network-order int."""
    if isinstance(address, tuple):
        return int(address[1])
    if isinstance(address, (bytes, bytearray)):
        if len(address) != 2:
            raise ValueError(f"port needs 2 bytes, got {len(address)}")
        return int.from_bytes(address, "big")
    if isinstance(address, int) and not isinstance(address, bool):
        return socket.ntohs(address)
    raise ValueError(f"not a port: {address!r}")


def domain_to_ip(domain: str) -> str:
    """Resolve ``domain`` to its first IPv4 address; raise socket.gaierror on failure."""
    infos = socket.getaddrinfo(domain, 0, socket.AF_INET)
    if not infos:
        raise socket.gaierror(f"no IPv4 address for {domain!r}")
    return infos[0][4][0]