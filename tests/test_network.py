import socket
from unittest import mock

import pytest

from fighterserver.network import (
    OPTION_NONBLOCKING,
    ProtocolType,
    SocketManager,
    domain_to_ip,
    format_ip,
    format_port,
)


def test_format_ip_from_tuple_and_bytes():
    assert format_ip(("192.168.10.1", 80)) == "192.168.10.1"
    assert format_ip(socket.inet_aton("192.168.10.1")) == "192.168.10.1"
    assert format_ip("127.0.0.1") == "127.0.0.1"


def test_format_ip_rejects_bad_input():
    with pytest.raises(ValueError):
        format_ip("not an address")
    with pytest.raises(ValueError):
        format_ip(b"\x01\x02")


def test_format_port_variants():
    assert format_port(("127.0.0.1", 11402)) == 11402
    assert format_port(socket.htons(11402)) == 11402
    assert format_port((11402).to_bytes(2, "big")) == 11402
    with pytest.raises(ValueError):
        format_port(b"\x01")


def test_domain_to_ip_numeric():
    assert domain_to_ip("127.0.0.1") == "127.0.0.1"


def test_domain_to_ip_failure_raises():
    with mock.patch("socket.getaddrinfo", side_effect=socket.gaierror("nope")):
        with pytest.raises(socket.gaierror):
            domain_to_ip("host.example.com")


def test_accept_before_start_raises():
    with pytest.raises(RuntimeError):
        SocketManager().accept()


def test_bad_protocol_rejected():
    with pytest.raises(ValueError):
        SocketManager().start_server("tcp", 0)


def test_tcp_accept_round_trip():
    with SocketManager() as manager:
        manager.start_server(ProtocolType.TCP_IP, 0, host="127.0.0.1")
        port = manager.listen_socket.getsockname()[1]
        with socket.create_connection(("127.0.0.1", port), timeout=5) as client:
            result = manager.accept()
            conn, address = result
            with conn:
                client.sendall(b"ping")
                conn.settimeout(5)
                assert conn.recv(4) == b"ping"
                assert format_ip(address) == "127.0.0.1"
                assert format_port(address) == client.getsockname()[1]


def test_nonblocking_accept_without_client_returns_none():
    with SocketManager() as manager:
        sock = manager.start_server(ProtocolType.TCP_IP, 0, OPTION_NONBLOCKING, "127.0.0.1")
        assert sock.getblocking() is False
        assert manager.accept() is None


def test_int_host_binds_loopback():
    with SocketManager() as manager:
        manager.start_server(ProtocolType.TCP_IP, 0, host=0x7F000001)
        assert manager.listen_socket.getsockname()[0] == "127.0.0.1"


def test_udp_socket_and_cleanup():
    manager = SocketManager()
    sock = manager.start_server(ProtocolType.UDP, 0, host="127.0.0.1")
    assert sock.type == socket.SOCK_DGRAM
    manager.cleanup()
    assert manager.listen_socket is None
    assert sock.fileno() == -1