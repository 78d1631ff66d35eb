"""Wire protocol of the fighter game: packet header, packet types and payload layouts."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

NETWORK_PORT = 11402
BASIC_NETWORK_PORT = 20000
MAX_PACKET_SIZE = 10
PACKET_CODE = 0x89

_HEADER = struct.Struct("<BBB")
HEADER_SIZE = _HEADER.size


class PacketType(IntEnum):
    """Packet type byte carried in the header."""

    SC_CREATE_MY_CHARACTER = 0
    SC_CREATE_OTHER_CHARACTER = 1
    SC_DELETE_CHARACTER = 2

    CS_MOVE_START = 10
    SC_MOVE_START = 11
    CS_MOVE_STOP = 12
    SC_MOVE_STOP = 13

    CS_ATTACK1 = 20
    SC_ATTACK1 = 21
    CS_ATTACK2 = 22
    SC_ATTACK2 = 23
    CS_ATTACK3 = 24
    SC_ATTACK3 = 25

    SC_DAMAGE = 30

    CS_SYNC = 250
    SC_SYNC = 251
    CS_ECHO = 252
    SC_ECHO = 253


class MoveDirection(IntEnum):
    """The eight movement directions; attacks and stops use only LL and RR."""

    LL = 0
    LU = 1
    UU = 2
    RU = 3
    RR = 4
    RD = 5
    DD = 6
    LD = 7


# Field layouts, little endian and packed:
#   I = UINT32 id/time, B = UINT8 direction/hp, H = UINT16 coordinate.
_CHARACTER = "<IBHHB"  # ID, Direction, X, Y, HP
_CLIENT_ACTION = "<BHH"  # Direction, X, Y
_SERVER_ACTION = "<IBHH"  # ID, Direction, X, Y

_PAYLOAD_FORMATS: dict[PacketType, str] = {
    PacketType.SC_CREATE_MY_CHARACTER: _CHARACTER,
    PacketType.SC_CREATE_OTHER_CHARACTER: _CHARACTER,
    PacketType.SC_DELETE_CHARACTER: "<I",
    PacketType.CS_MOVE_START: _CLIENT_ACTION,
    PacketType.SC_MOVE_START: _SERVER_ACTION,
    PacketType.CS_MOVE_STOP: _CLIENT_ACTION,
    PacketType.SC_MOVE_STOP: _SERVER_ACTION,
    PacketType.CS_ATTACK1: _CLIENT_ACTION,
    PacketType.SC_ATTACK1: _SERVER_ACTION,
    PacketType.CS_ATTACK2: _CLIENT_ACTION,
    PacketType.SC_ATTACK2: _SERVER_ACTION,
    PacketType.CS_ATTACK3: _CLIENT_ACTION,
    PacketType.SC_ATTACK3: _SERVER_ACTION,
    PacketType.SC_DAMAGE: "<IIB",  # AttackID, DamageID, DamageHP
    PacketType.CS_SYNC: "<HH",  # X, Y
    PacketType.SC_SYNC: "<IHH",  # ID, X, Y
    PacketType.CS_ECHO: "<I",  # Time
    PacketType.SC_ECHO: "<I",  # Time
}


def _as_packet_type(packet_type: int) -> PacketType:
    try:
        return PacketType(packet_type)
    except ValueError:
        raise ValueError(f"unknown packet type {packet_type!r}") from None


@dataclass(frozen=True)
class PacketHeader:
    """Three-byte header: code (always 0x89), payload size, packet type."""

    size: int
    packet_type: int
    code: int = PACKET_CODE

    def pack(self) -> bytes:
        """Encode the header as its three wire bytes."""
        try:
            return _HEADER.pack(self.code, self.size, int(self.packet_type))
        except struct.error as exc:
            raise ValueError(f"header field out of range: {exc}") from None

    @classmethod
    def unpack(cls, data: bytes) -> PacketHeader:
        """Decode a header from the first three bytes of ``data``."""
        if len(data) < HEADER_SIZE:
            raise ValueError(
                f"header needs {HEADER_SIZE} bytes, got {len(data)}"
            )
        code, size, packet_type = _HEADER.unpack_from(data)
        return cls(size=size, packet_type=packet_type, code=code)


def payload_format(packet_type: int) -> str:
    """Return the struct format of the payload of ``packet_type``."""
    return _PAYLOAD_FORMATS[_as_packet_type(packet_type)]


def payload_size(packet_type: int) -> int:
    """Return the payload length in bytes for ``packet_type``."""
    return struct.calcsize(payload_format(packet_type))


def build_packet(packet_type: int, *args: int) -> bytes:
    """Build a complete packet (header and payload) from its field values."""
    kind = _as_packet_type(packet_type)
    fmt = _PAYLOAD_FORMATS[kind]
    try:
        payload = struct.pack(fmt, *(int(value) for value in args))
    except struct.error as exc:
        raise ValueError(f"bad fields for {kind.name}: {exc}") from None
    header = PacketHeader(size=len(payload), packet_type=kind)
    return header.pack() + payload


def parse_packet(data: bytes) -> tuple[PacketType, tuple[int, ...]]:
    """Decode one complete packet into its type and its field values."""
    header = PacketHeader.unpack(data)
    if header.code != PACKET_CODE:
        raise ValueError(f"bad packet code 0x{header.code:02x}")
    kind = _as_packet_type(header.packet_type)
    fmt = _PAYLOAD_FORMATS[kind]
    expected = struct.calcsize(fmt)
    if header.size != expected:
        raise ValueError(
            f"{kind.name} payload must be {expected} bytes, header says {header.size}"
        )
    payload = bytes(data[HEADER_SIZE:])
    if len(payload) != header.size:
        raise ValueError(
            f"{kind.name} payload is {len(payload)} bytes, expected {header.size}"
        )
    return kind, struct.unpack(fmt, payload)