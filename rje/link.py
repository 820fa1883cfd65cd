"""BSC link handshake and byte channels.

Usage:
    from .link import Link, SocketChannel

The link is half duplex. After a frame is sent, the host answers
with exactly one response, which Link.await_response classifies:

    DLE ACK0, DLE ACK1  AFFIRMATIVE
    ENQ                 AFFIRMATIVE_REQUEST
    DLE RVI             AFFIRMATIVE_RVI
    NAK                 NEGATIVE
    EOT                 NEGATIVE_DISCONNECT

A NUL from the host means the line dropped.

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
import enum
import logging

from .bsc import ControlByte
from .errors import ProtocolError
from .errors import TransportDisconnect

__author__ = "Neil Johnson"


class HandshakeOutcome(enum.Enum):
    """Classified host response
    """
    AFFIRMATIVE = enum.auto()
    AFFIRMATIVE_REQUEST = enum.auto()
    AFFIRMATIVE_RVI = enum.auto()
    NEGATIVE = enum.auto()
    NEGATIVE_DISCONNECT = enum.auto()

    @property
    def affirmative(self):
        """Bool indicating if the host accepted the frame.
        """
        return self in (HandshakeOutcome.AFFIRMATIVE,
                        HandshakeOutcome.AFFIRMATIVE_REQUEST,
                        HandshakeOutcome.AFFIRMATIVE_RVI)


class Channel:
    """Duplex byte channel.

    Iterating a channel reads the inbound stream one byte (int) at
    a time. The end of the inbound stream raises
    TransportDisconnect; a channel is not restartable. Traffic is
    logged to rje.trace only while trace is set.
    """

    def __init__(self):
        self.bytes_sent = 0
        self.bytes_received = 0
        self.trace = False

    def __iter__(self):
        return self

    def __next__(self):
        data = self._read()
        if not data:
            raise TransportDisconnect("Connection closed by host")

        self.bytes_received += 1
        if self.trace:
            _trace.debug("RECV %02x", data[0])

        return data[0]

    def close(self):
        """Close the channel.
        """

    def write(self, data):
        """Send bytes to the host.
        """
        if self.trace:
            _trace.debug("SEND %s", data.hex())

        self._write(data)
        self.bytes_sent += len(data)

    def _read(self):
        raise NotImplementedError()

    def _write(self, data):
        raise NotImplementedError()


class SocketChannel(Channel):
    """Channel on a connected stream socket.
    """

    def __init__(self, sock):
        super().__init__()
        self.sock = sock

    def close(self):
        sock = self.sock
        if sock:
            self.sock = None
            sock.close()

    def _read(self):
        if not self.sock:
            return b""

        try:
            return self.sock.recv(1)
        except OSError as exc:
            raise TransportDisconnect(f"recv failed: {exc}") from exc

    def _write(self, data):
        if not self.sock:
            raise TransportDisconnect("Not connected")

        try:
            self.sock.sendall(data)
        except OSError as exc:
            raise TransportDisconnect(f"send failed: {exc}") from exc


class MemoryChannel(Channel):
    """Channel on an in-memory inbound buffer.

    Outbound bytes are kept in the outbound bytearray.
    """

    def __init__(self, inbound=b""):
        super().__init__()
        self.inbound = bytearray(inbound)
        self.outbound = bytearray()
        self.__pos = 0

    def feed(self, data):
        """Add data to the inbound buffer.
        """
        self.inbound += data

    def _read(self):
        pos = self.__pos
        if pos >= len(self.inbound):
            return b""

        self.__pos = pos + 1
        return self.inbound[pos:pos+1]

    def _write(self, data):
        self.outbound += data


class Link:
    """Half-duplex handshake over a channel.
    """

    def __init__(self, channel):
        self.channel = channel
        self.ack_parity = None  # parity of the last DLE ACKn received

    def __iter__(self):
        return iter(self.channel)

    def await_response(self):
        """Read and classify the host response to a frame.
        """
        channel = self.channel
        for byte in channel:
            if byte == ControlByte.DLE:
                byte2 = next(channel)
                if byte2 == ControlByte.ACK0:
                    self.ack_parity = 0
                    return HandshakeOutcome.AFFIRMATIVE

                if byte2 == ControlByte.ACK1:
                    self.ack_parity = 1
                    return HandshakeOutcome.AFFIRMATIVE

                if byte2 == ControlByte.RVI:
                    return HandshakeOutcome.AFFIRMATIVE_RVI

                if byte2 == ControlByte.DLE:
                    _logger.debug("Ignoring DLE DLE awaiting response")
                    continue

                raise ProtocolError(f"DLE 0x{byte2:02x} not a response")

            if byte == ControlByte.ENQ:
                return HandshakeOutcome.AFFIRMATIVE_REQUEST

            if byte == ControlByte.EOT:
                return HandshakeOutcome.NEGATIVE_DISCONNECT

            if byte == ControlByte.NAK:
                return HandshakeOutcome.NEGATIVE

            if byte == ControlByte.NUL:
                raise TransportDisconnect("NUL received, line dropped")

            _logger.debug("Ignoring 0x%02x awaiting response", byte)

    def send(self, frame):
        """Send a frame.
        """
        self.channel.write(frame)

    def send_ack(self, parity):
        """Send DLE ACK0 (parity 0) or DLE ACK1 (parity 1).
        """
        if parity:
            ack = ControlByte.ACK1
        else:
            ack = ControlByte.ACK0

        self.channel.write(bytes((ControlByte.DLE, ack)))

    def send_and_await(self, frame):
        """Send a frame and return the classified host response.
        """
        self.send(frame)
        return self.await_response()


# Private data

_logger = logging.getLogger("rje.link")
_trace = logging.getLogger("rje.trace")
