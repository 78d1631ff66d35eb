"""Connected client sessions and the queues that carry data out to them."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from fighterserver.network import format_ip, format_port
from fighterserver.protocol import PacketHeader

_log = logging.getLogger(__name__)

_session_ids = itertools.count()

# Longest dotted IPv4 text a session keeps.
_MAX_IP_LENGTH = 15

DisconnectCallback = Callable[["Session"], None]


@dataclass(eq=False)
class Session:
    """One connected client: its socket, address, queues and game object."""

    sock: Any
    ip: str = ""
    port: int = 0
    is_alive: bool = True
    session_id: int = field(default_factory=lambda: next(_session_ids))
    recv_q: bytearray = field(default_factory=bytearray, repr=False)
    send_q: bytearray = field(default_factory=bytearray, repr=False)
    send_capacity: Optional[int] = None
    obj: Any = None
    recv_count: int = 0
    send_count: int = 0
    last_recv_time: int = 0
    last_send_time: int = 0

    def register_object(self, obj: Any) -> None:
        """Attach the game object this session controls."""
        self.obj = obj

    def _enqueue(self, data: bytes) -> bool:
        """Append ``data`` to the send queue; return False if it does not fit."""
        if self.send_capacity is not None and len(self.send_q) + len(data) > self.send_capacity:
            return False
        self.send_q += data
        return True


class SessionManager:
    """Holds the sessions of connected clients, keyed by socket."""

    def __init__(
        self,
        on_disconnect: Optional[DisconnectCallback] = None,
        send_capacity: Optional[int] = None,
    ) -> None:
        self.sessions: dict[Any, Session] = {}
        self.on_disconnect = on_disconnect
        self.send_capacity = send_capacity

    def create_session(self, sock: Any, address: Any) -> Session:
        """Create a live session for an accepted socket and register it."""
        session = Session(
            sock=sock,
            ip=format_ip(address)[:_MAX_IP_LENGTH],
            port=format_port(address),
            send_capacity=self.send_capacity,
        )
        self.sessions[sock] = session
        return session

    def notify_disconnected(self, session: Session) -> None:
        """Mark ``session`` dead; it is removed on the next ``update``."""
        session.is_alive = False

    def _push(self, session: Session, data: bytes, where: str) -> bool:
        if session._enqueue(data):
            return True
        self.notify_disconnected(session)
        _log.error("%s: send queue of session %d is full", where, session.session_id)
        return False

    def broadcast_data(self, data: bytes, exclude: Optional[Session] = None) -> None:
        """Queue ``data`` for every live session except ``exclude``."""
        for session in list(self.sessions.values()):
            if not session.is_alive or session is exclude:
                continue
            self._push(session, bytes(data), "broadcast")

    def broadcast_packet(
        self, header: PacketHeader, payload: bytes, exclude: Optional[Session] = None
    ) -> None:
        """Queue a header and its payload for every live session except ``exclude``."""
        body = _payload_for(header, payload)
        self.broadcast_data(header.pack(), exclude)
        self.broadcast_data(body, exclude)

    def unicast_data(self, session: Session, data: bytes) -> bool:
        """Queue ``data`` for one session; return whether it was queued."""
        if not session.is_alive:
            return False
        return self._push(session, bytes(data), "unicast")

    def unicast_packet(self, session: Session, header: PacketHeader, payload: bytes) -> bool:
        """Queue a header and its payload for one session."""
        body = _payload_for(header, payload)
        sent_header = self.unicast_data(session, header.pack())
        sent_body = self.unicast_data(session, body)
        return sent_header and sent_body

    def update(self) -> list[Session]:
        """Drop dead sessions, closing their sockets; return the ones removed."""
        removed = [s for s in self.sessions.values() if not s.is_alive]
        for session in removed:
            if self.on_disconnect is not None:
                self.on_disconnect(session)
            close = getattr(session.sock, "close", None)
            if close is not None:
                close()
            del self.sessions[session.sock]
        return removed


def _payload_for(header: PacketHeader, payload: bytes) -> bytes:
    if len(payload) < header.size:
        raise ValueError(
            f"payload is {len(payload)} bytes, header says {header.size}"
        )
    return bytes(payload[: header.size])