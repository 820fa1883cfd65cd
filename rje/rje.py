"""RJE station class.

Session driver for a remote job entry station on a BSC link.

Usage:
    from rje import rje

Environment variables used:
    RJE_CODE_PAGE
    RJE_DEBUG
    RJE_LOGGING
    RJE_NAK_POLICY
    RJE_STATION
    RJE_TAPE

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
import json
import logging
import os
import re
import socket

from . import _util
from .bsc import EOT
from .bsc import ETX
from .bsc import FIELD_SEP
from .bsc import LINE_END
from .bsc import FrameDecoder
from .bsc import SessionState
from .bsc import encode_frame
from .codec import DEFAULT_CODE_PAGE
from .codec import Codec
from .errors import NegativeAcknowledgement
from .errors import ProtocolDisconnect
from .errors import RjeError
from .errors import SinkError
from .link import HandshakeOutcome
from .link import Link
from .link import SocketChannel
from .tape import DEFAULT_TAPE
from .tape import LAST_LINE
from .tape import PAGE_LINES
from .tape import Tape

__author__ = "Neil Johnson"

NAK_POLICIES = ("record", "abort", "retry")


class Rje:
    """One instance for each station session and its channel.

    Methods for the station operator:
        submit      send a job deck to the host
        retrieve    receive print and punch output from the host

    Statistics:
        bytes_sent, bytes_received   channel traffic
        lines_printed                print lines written
        cards_punched                80 column punch cards written
        outcomes                     host responses to sent frames
        line                         current line on the page (0-65)
    """

    def __init__(self, channel, name=None,
                 code_page=None, tape=None, station=None,
                 nak_policy=None, nak_retries=3, debug=None):
        """Create a new Rje object.
        """
        self.__log_check()

        if code_page is None:
            code_page = os.getenv("RJE_CODE_PAGE", DEFAULT_CODE_PAGE)

        if tape is None:
            tape = os.getenv("RJE_TAPE", DEFAULT_TAPE)

        if station is None:
            station = os.getenv("RJE_STATION", "RMT1")

        if nak_policy is None:
            nak_policy = os.getenv("RJE_NAK_POLICY", "record")

        if nak_policy not in NAK_POLICIES:
            raise ValueError(f"nak_policy must be one of {NAK_POLICIES}")

        if debug is None:
            debug = bool(os.getenv("RJE_DEBUG"))

        self.name = name or station
        self.debug = bool(debug)
        self.station = station
        self.nak_policy = nak_policy
        self.nak_retries = nak_retries

        self.codec = Codec(code_page)
        self.tape = Tape(tape)
        self.channel = channel
        self.link = Link(channel)
        self.state = SessionState()
        if self.debug:
            for logger_name in ("rje.trace", "rje.cc"):
                logger = logging.getLogger(logger_name)
                if logger.level == logging.NOTSET:
                    logger.setLevel(logging.DEBUG)

            channel.trace = True
            self.state.debug = True

        self.decoder = FrameDecoder(self.link, self.state)

        self.line = 0
        self.lines_printed = 0
        self.cards_punched = 0
        self.outcomes = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """Close the channel.
        """
        self.channel.close()

    def print_line(self, print_file, code, text):
        """Write one print line, spaced by its carriage control.
        """
        dest, blank = self.tape.resolve(self.line, code)
        if self.debug:
            _cc_logger.debug("%s line %d %r -> %d (%d blank)",
                             self.name, self.line, code, dest, blank)

        try:
            print_file.write(text + "\n" + "\n" * blank)
        except OSError as exc:
            raise SinkError(f"print output: {exc}") from exc

        if dest > LAST_LINE:
            dest -= PAGE_LINES  # next page

        self.line = dest
        self.lines_printed += 1

    def retrieve(self, print_file, punch_file=None):
        """Receive output from the host.

        Print lines are written as text to print_file. Punch
        records are written as host card code bytes to punch_file.
        The host answers the dial frame with its output blocks, so
        decoding starts right after the dial frame is written.
        Returns False if the host sent EOT before any output, else
        True.
        """
        self.link.send(self.__frame(self.station))
        records = self.state.records
        while True:
            record = self.decoder.next_record()
            if record is None:
                break

            if self.state.punch_mode:
                if record:
                    self.__punch(punch_file, record)

            elif record:
                self.__print_record(print_file, record)

        if self.state.records == records:
            self.__log_info("No output from host")
            return False

        self.__log_info("Received %d line(s), %d card(s)",
                        self.lines_printed, self.cards_punched)
        return True

    def submit(self, jobno, lines):
        """Send a job deck to the host.

        jobno: six digit job number
        lines: iterable of card text

        Returns False if the host ended the session before the
        deck was sent, else True.
        """
        jobno = _util.job_number(jobno)
        card = self.__card_frame
        try:
            self.__send_frame(self.__frame(self.station))
            self.__send_frame(card(f"/*SIGNON {self.station}"))
            self.__send_frame(card(f"/*JOBNO {jobno}"))
            self.__send_frame(
                self.__frame(f"JOB {jobno} SUBMITTED BY {self.station}"))
            count = 0
            for line in lines:
                self.__send_frame(card(line))
                count += 1

            self.__send_frame(card("/*SIGNOFF", EOT))

        except ProtocolDisconnect:
            self.__log_info("Host ended the session, job %s", jobno)
            return False

        self.__log_info("Job %s submitted, %d card(s)", jobno, count)
        return True

    # Private methods

    def __card_frame(self, text, terminator=ETX):
        return self.__frame(_util.card_image(text), terminator)

    def __frame(self, text, terminator=ETX):
        return encode_frame(self.codec.encode(text), terminator)

    def __log(self, lvl, *args, **kwargs):
        self.__logger.log(lvl, "%s "+args[0],
                          self.name, *args[1:], **kwargs)

    def __log_info(self, *args, **kwargs):
        return self.__log(logging.INFO, *args, **kwargs)

    def __log_warn(self, *args, **kwargs):
        return self.__log(logging.WARNING, *args, **kwargs)

    def __print_record(self, print_file, record):
        decode = self.codec.decode
        for raw in record.split(bytes((LINE_END,))):
            if not raw:
                continue

            match = self.__pat_line.fullmatch(raw)
            if not match:
                self.__log_warn("Malformed output line: %s",
                                raw[:8].hex())
                continue

            self.print_line(print_file, decode(match[1]), decode(match[2]))

    def __punch(self, punch_file, record):
        if punch_file is None:
            raise SinkError("punch output not available")

        try:
            punch_file.write(record)
        except OSError as exc:
            raise SinkError(f"punch output: {exc}") from exc

        # one or more 80 column card images
        self.cards_punched += max(1, -(-len(record) // _util.CARD_WIDTH))

    def __send_frame(self, frame):
        retries = 0
        while True:
            outcome = self.link.send_and_await(frame)
            self.outcomes.append(outcome)
            if outcome is HandshakeOutcome.NEGATIVE_DISCONNECT:
                raise ProtocolDisconnect("EOT received")

            if outcome is not HandshakeOutcome.NEGATIVE:
                return outcome

            if self.nak_policy == "record":
                self.__log_warn("NAK received, continuing")
                return outcome

            if self.nak_policy == "retry" and retries < self.nak_retries:
                retries += 1
                self.__log_warn("NAK received, retry %d", retries)
                continue

            raise NegativeAcknowledgement("Frame rejected by host")

    # Readonly properties

    @property
    def bytes_received(self):
        """Number of bytes received from the host.
        """
        return self.channel.bytes_received

    @property
    def bytes_sent(self):
        """Number of bytes sent to the host.
        """
        return self.channel.bytes_sent

    @property
    def punch_mode(self):
        """Bool indicating if output is being punched.
        """
        return self.state.punch_mode

    # Class methods

    @classmethod
    def logging(cls):
        """Initialize logging
        """
        cls.__log_check()

    # Private class methods

    @classmethod
    def __log_check(cls):
        if cls.__logger:
            return

        logger = logging.getLogger("rje")
        cls.__logger = logger

        rje_logging = os.getenv("RJE_LOGGING")
        if rje_logging == "":
            return

        if rje_logging is None:
            dirname = os.path.expanduser(__file__)
            dirname = os.path.abspath(dirname)
            dirname = os.path.dirname(dirname)
            rje_logging = os.path.join(dirname, "logging.json")

        with open(rje_logging) as file:
            logd = json.load(file)

        from logging.config import dictConfig

        logd["disable_existing_loggers"] = False
        dictConfig(logd)

    # Class data

    __logger = None  # will be set by __log_check

    # Private class data

    __pat_line = re.compile(b"(.)" + bytes((FIELD_SEP,)) + b"(.*)",
                            re.DOTALL)


# Functions

def connect(host=None, port=None, **kwargs):
    """Create a new Rje object connected to the host.

    Keyword arguments are passed to Rje.
    """
    if host is None:
        host = "127.0.0.1"  # default host

    if port is None:
        port = _util.DEFAULT_PORT

    try:
        sock = socket.create_connection((host, port))
    except OSError as exc:
        raise RjeError(f"Unable to connect to {host}:{port}: {exc}") from exc

    try:
        return Rje(SocketChannel(sock), **kwargs)
    except Exception:
        sock.close()
        raise


# Private data

_cc_logger = logging.getLogger("rje.cc")
