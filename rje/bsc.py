"""Bisync (BSC) control characters and frame codec.

Usage:
    from . import bsc

Frames on the wire look like:

    SYN SYN DLE STX payload DLE ETX

The terminator may be ETX, ETB, EM or EOT. Inbound, the host
interleaves printer control with the text. ESC introduces a
carriage-control code and IUS ends a printed line. SOH introduces
an addressing or component-select sequence.

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
import enum
import logging

from .errors import ProtocolError

__author__ = "Neil Johnson"


class ControlByte(enum.IntEnum):
    """BSC control characters (EBCDIC).
    """
    NUL = 0x00
    SOH = 0x01  # start of heading
    STX = 0x02  # start of text
    ETX = 0x03  # end of text
    DLE = 0x10  # data link escape
    EM = 0x19  # end of message
    IUS = 0x1f  # intermediate block (end of print line)
    ETB = 0x26  # end of transmission block
    ESC = 0x27
    ENQ = 0x2d
    SYN = 0x32  # pad/sync
    EOT = 0x37  # end of transmission
    NAK = 0x3d
    ACK0 = 0x61  # DLE ACK0
    ACK1 = 0x70  # DLE ACK1
    RVI = 0x7c  # DLE RVI (reverse interrupt)


SOH = ControlByte.SOH
STX = ControlByte.STX
ETX = ControlByte.ETX
DLE = ControlByte.DLE
EM = ControlByte.EM
IUS = ControlByte.IUS
ETB = ControlByte.ETB
ESC = ControlByte.ESC
SYN = ControlByte.SYN
EOT = ControlByte.EOT
ENQ = ControlByte.ENQ

SYNC_PREAMBLE = bytes((SYN, SYN))
TERMINATORS = (ETX, ETB, EM, EOT)

LINE_END = 0x15  # NL appended to a record for each print line
FIELD_SEP = 0x1e  # separates carriage control from print text
PUNCH_SELECT = 0xf4  # ESC 4 selects the punch


class SessionState:
    """Link state owned by one session.

    parity       next acknowledgement to send (0=ACK0, 1=ACK1)
    punch_mode   records are card images, not print lines
    extended     SYN is data (set once SOH ESC has been seen)
    records      records acknowledged
    debug        trace carriage control
    """

    def __init__(self):
        self.parity = 0
        self.punch_mode = False
        self.extended = False
        self.records = 0
        self.debug = False


class FrameDecoder:
    """Pull records from the inbound byte stream of a link.

    The link must be iterable (one int per byte) and must have a
    send_ack method.
    """

    def __init__(self, link, state=None):
        if state is None:
            state = SessionState()

        self.link = link
        self.state = state

    def next_record(self):
        """Read the next record from the host.

        Returns the record bytes, or None when the host sent EOT.
        Each record other than EOT is acknowledged before it is
        returned. A handshake response (DLE ACKn, DLE RVI or ENQ)
        ahead of the STX is skipped.
        """
        state = self.state
        record = bytearray()
        line_done = False  # a print line of this block has ended
        text = False  # STX seen
        mode = _Mode.NORMAL
        for byte in self.link:
            if mode is _Mode.NORMAL:
                if byte == SYN:
                    if state.extended:
                        record.append(byte)

                elif byte == STX:
                    text = True

                elif byte == DLE:
                    mode = _Mode.AFTER_DLE

                elif byte == SOH:
                    mode = _Mode.AFTER_SOH

                elif byte == ESC:
                    mode = _Mode.AFTER_ESC

                elif byte == IUS:
                    line_done = True
                    if not state.punch_mode:
                        record.append(LINE_END)

                elif byte in TERMINATORS:
                    return self.__end(record, byte)

                elif byte == ENQ and not text:
                    _logger.debug("Skipping ENQ ahead of record")

                else:
                    record.append(byte)

            elif mode is _Mode.AFTER_DLE:
                mode = _Mode.NORMAL
                if byte == STX:
                    text = True

                elif byte in TERMINATORS:
                    return self.__end(record, byte)

                elif byte == DLE:
                    record.append(byte)

                elif byte == SYN:
                    pass  # transparent idle

                elif byte in _RESPONSES and not text:
                    _logger.debug("Skipping DLE 0x%02x ahead of record", byte)

                else:
                    raise ProtocolError(f"DLE 0x{byte:02x} not recognized")

            elif mode is _Mode.AFTER_SOH:
                if byte == ESC:
                    state.extended = True
                    mode = _Mode.AFTER_ESC
                    continue

                mode = _Mode.NORMAL
                if record:
                    record.append(byte)
                else:
                    # address ahead of the first carriage control
                    _logger.debug("Skipping address 0x%02x", byte)

            else:  # AFTER_ESC
                mode = _Mode.NORMAL
                self.__carriage_control(record, byte, line_done)

    def __carriage_control(self, record, code, line_done):
        state = self.state
        if state.debug:
            _cc_logger.debug("ESC 0x%02x punch_mode=%s",
                             code, state.punch_mode)

        if code == PUNCH_SELECT and not line_done:
            if record:
                _logger.debug("Discarding %d byte(s) before punch select",
                              len(record))

            record.clear()
            if not state.punch_mode:
                _logger.info("Punch selected")
                state.punch_mode = True

        elif not state.punch_mode:
            record.append(code)
            record.append(FIELD_SEP)

    def __end(self, record, terminator):
        state = self.state
        if terminator == EOT:
            _logger.debug("EOT after %d record(s)", state.records)
            return None

        self.link.send_ack(state.parity)
        state.parity ^= 1
        state.records += 1
        if record[:1] == b"\x10":  # stray DLE
            del record[0]

        return bytes(record)


# Functions

def encode_frame(data, terminator=ETX):
    """Frame host card code bytes for transmission.

    data: payload, already translated to host code
    terminator: ETX (default), ETB, EM or EOT
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("input data must be bytes")

    if terminator not in TERMINATORS:
        raise ValueError(f"Not a frame terminator: {terminator!r}")

    if DLE in data:
        raise ValueError("DLE not allowed in frame data")

    return b"".join((SYNC_PREAMBLE,
                     bytes((DLE, STX)),
                     data,
                     bytes((DLE, terminator))))


# Private data

class _Mode(enum.Enum):
    """Decode state
    """
    NORMAL = enum.auto()
    AFTER_DLE = enum.auto()
    AFTER_ESC = enum.auto()
    AFTER_SOH = enum.auto()


_RESPONSES = (ControlByte.ACK0, ControlByte.ACK1, ControlByte.RVI)
_logger = logging.getLogger("rje.bsc")
_cc_logger = logging.getLogger("rje.cc")
