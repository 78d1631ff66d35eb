import pytest

from fighterserver.protocol import (
    MAX_PACKET_SIZE,
    PACKET_CODE,
    MoveDirection,
    PacketHeader,
    PacketType,
    build_packet,
    parse_packet,
    payload_format,
    payload_size,
)


def _zero_args(packet_type):
    return (0,) * (len(payload_format(packet_type)) - 1)


@pytest.mark.parametrize(
    "packet_type, wire_value",
    [
        (PacketType.SC_CREATE_MY_CHARACTER, 0),
        (PacketType.CS_MOVE_START, 10),
        (PacketType.SC_DAMAGE, 30),
        (PacketType.SC_ECHO, 253),
    ],
)
def test_packet_type_values_match_protocol(packet_type, wire_value):
    packet = build_packet(packet_type, *_zero_args(packet_type))
    assert packet[2] == wire_value


@pytest.mark.parametrize(
    "name, value",
    [("LL", 0), ("LU", 1), ("UU", 2), ("RU", 3), ("RR", 4), ("RD", 5), ("DD", 6), ("LD", 7)],
)
def test_move_direction_values(name, value):
    direction = MoveDirection[name]
    packet = build_packet(PacketType.CS_MOVE_START, direction, 0, 0)
    assert packet[3] == value
    _, values = parse_packet(packet)
    assert MoveDirection(values[0]).name == name


def test_header_pack_wire_bytes():
    header = PacketHeader(size=10, packet_type=PacketType.SC_CREATE_MY_CHARACTER)
    assert header.pack() == bytes([0x89, 10, 0])


def test_header_round_trip():
    header = PacketHeader(size=5, packet_type=PacketType.CS_ATTACK2)
    decoded = PacketHeader.unpack(header.pack())
    assert decoded.code == PACKET_CODE
    assert decoded.size == 5
    assert decoded.packet_type == PacketType.CS_ATTACK2


def test_header_unpack_short_data():
    with pytest.raises(ValueError):
        PacketHeader.unpack(b"\x89\x01")


def test_header_pack_out_of_range():
    with pytest.raises(ValueError):
        PacketHeader(size=300, packet_type=0).pack()


@pytest.mark.parametrize(
    "packet_type, size",
    [
        (PacketType.SC_CREATE_MY_CHARACTER, 10),
        (PacketType.SC_CREATE_OTHER_CHARACTER, 10),
        (PacketType.SC_DELETE_CHARACTER, 4),
        (PacketType.CS_MOVE_START, 5),
        (PacketType.SC_MOVE_STOP, 9),
        (PacketType.SC_DAMAGE, 9),
        (PacketType.CS_SYNC, 4),
        (PacketType.SC_SYNC, 8),
        (PacketType.CS_ECHO, 4),
    ],
)
def test_payload_sizes_match_documented_layouts(packet_type, size):
    assert payload_size(packet_type) == size


def test_no_payload_exceeds_max_packet_size():
    assert max(payload_size(t) for t in PacketType) == MAX_PACKET_SIZE


def test_client_and_server_actions_share_layouts():
    assert payload_format(PacketType.CS_ATTACK1) == payload_format(PacketType.CS_MOVE_START)
    assert payload_format(PacketType.SC_ATTACK3) == payload_format(PacketType.SC_MOVE_START)


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        payload_size(99)


def test_build_delete_character_bytes():
    packet = build_packet(PacketType.SC_DELETE_CHARACTER, 1)
    assert packet == bytes([0x89, 4, 2, 1, 0, 0, 0])


def test_build_and_parse_round_trip_character():
    packet = build_packet(PacketType.SC_CREATE_MY_CHARACTER, 7, MoveDirection.RR, 300, 200, 100)
    kind, values = parse_packet(packet)
    assert kind is PacketType.SC_CREATE_MY_CHARACTER
    assert values == (7, 4, 300, 200, 100)
    assert len(packet) == 3 + payload_size(kind)


@pytest.mark.parametrize("packet_type", list(PacketType))
def test_round_trip_every_type(packet_type):
    count = len(payload_format(packet_type)) - 1
    args = tuple(range(1, count + 1))
    kind, values = parse_packet(build_packet(packet_type, *args))
    assert kind == packet_type
    assert values == args


def test_build_wrong_argument_count():
    with pytest.raises(ValueError):
        build_packet(PacketType.CS_MOVE_START, 1, 2)


def test_build_value_out_of_range():
    with pytest.raises(ValueError):
        build_packet(PacketType.CS_MOVE_START, 256, 0, 0)


def test_parse_bad_code():
    packet = bytearray(build_packet(PacketType.CS_ECHO, 5))
    packet[0] = 0x88
    with pytest.raises(ValueError):
        parse_packet(bytes(packet))


def test_parse_size_mismatch():
    packet = bytearray(build_packet(PacketType.CS_ECHO, 5))
    packet[1] = 3
    with pytest.raises(ValueError):
        parse_packet(bytes(packet))


def test_parse_truncated_payload():
    packet = build_packet(PacketType.SC_DAMAGE, 1, 2, 50)
    with pytest.raises(ValueError):
        parse_packet(packet[:-1])


def test_parse_unknown_type():
    with pytest.raises(ValueError):
        parse_packet(bytes([0x89, 0, 99]))