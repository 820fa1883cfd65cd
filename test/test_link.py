import socket

import pytest

from rje.bsc import ControlByte as C
from rje.errors import ProtocolError, TransportDisconnect
from rje.link import HandshakeOutcome, Link, MemoryChannel, SocketChannel


def await_response(inbound):
    channel = MemoryChannel(inbound)
    link = Link(channel)
    return link.await_response(), link, channel


def test_classify():
    tokens = {b"\x10\x61": HandshakeOutcome.AFFIRMATIVE,
              b"\x10\x70": HandshakeOutcome.AFFIRMATIVE,
              b"\x2d": HandshakeOutcome.AFFIRMATIVE_REQUEST,
              b"\x10\x7c": HandshakeOutcome.AFFIRMATIVE_RVI,
              b"\x37": HandshakeOutcome.NEGATIVE_DISCONNECT,
              b"\x3d": HandshakeOutcome.NEGATIVE,
              }
    for token, expected in tokens.items():
        outcome, _, channel = await_response(token)
        assert outcome is expected
        assert channel.bytes_received == len(token)


def test_affirmative():
    assert HandshakeOutcome.AFFIRMATIVE.affirmative
    assert HandshakeOutcome.AFFIRMATIVE_REQUEST.affirmative
    assert HandshakeOutcome.AFFIRMATIVE_RVI.affirmative
    assert not HandshakeOutcome.NEGATIVE.affirmative
    assert not HandshakeOutcome.NEGATIVE_DISCONNECT.affirmative


def test_ack_parity():
    _, link, _ = await_response(b"\x10\x61")
    assert link.ack_parity == 0
    _, link, _ = await_response(b"\x10\x70")
    assert link.ack_parity == 1


def test_noise():
    outcome, _, channel = await_response(b"\x32\x32\x40\xc1\x10\x10\x3d\x2d")
    assert outcome is HandshakeOutcome.NEGATIVE
    assert channel.bytes_received == 7  # ENQ left unread


def test_nul():
    with pytest.raises(TransportDisconnect):
        await_response(b"\x32\x00\x10\x61")


def test_short_read():
    with pytest.raises(TransportDisconnect):
        await_response(b"")

    with pytest.raises(TransportDisconnect):
        await_response(b"\x10")


def test_dle_unknown():
    with pytest.raises(ProtocolError):
        await_response(b"\x10\x6b")


def test_send_ack():
    channel = MemoryChannel()
    link = Link(channel)
    link.send_ack(0)
    link.send_ack(1)
    assert bytes(channel.outbound) == b"\x10\x61\x10\x70"
    assert channel.bytes_sent == 4


def test_send_and_await():
    channel = MemoryChannel(b"\x10\x70")
    link = Link(channel)
    frame = b"\x32\x32\x10\x02\xc1\x10\x03"
    assert link.send_and_await(frame) is HandshakeOutcome.AFFIRMATIVE
    assert bytes(channel.outbound) == frame


def test_memory_channel():
    channel = MemoryChannel(b"\x01")
    assert next(channel) == 1
    channel.feed(b"\x02\x03")
    assert next(channel) == 2
    assert next(channel) == 3
    with pytest.raises(TransportDisconnect):
        next(channel)

    assert channel.bytes_received == 3


def test_control_bytes():
    assert C.DLE == 0x10
    assert bytes((C.DLE, C.ACK0)) == b"\x10\x61"


def test_socket_channel():
    sock1, sock2 = socket.socketpair()
    channel = SocketChannel(sock1)
    try:
        channel.write(b"\x10\x61")
        assert sock2.recv(2) == b"\x10\x61"
        sock2.sendall(b"\x3d")
        assert Link(channel).await_response() is HandshakeOutcome.NEGATIVE
        sock2.close()
        with pytest.raises(TransportDisconnect):
            next(channel)

    finally:
        channel.close()
        sock2.close()

    assert channel.sock is None
    with pytest.raises(TransportDisconnect):
        channel.write(b"\x37")
