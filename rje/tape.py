"""Carriage-control tape

Usage: from .tape import Tape

A printer carriage-control tape has eight channels (A through H).
A hole punched in a channel at a line stops a skip to that channel
at that line. The Tape class precomputes, for every line of the
66-line page and every channel, the line a skip lands on. A
destination above the last line is on the next page: line K of the
next page is represented as K+66.

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
import logging

__author__ = "Neil Johnson"

PAGE_LINES = 66
LAST_LINE = PAGE_LINES - 1
CHANNELS = "ABCDEFGH"
DEFAULT_TAPE = "0:H,3:A,65:C"

SINGLE_SPACE = "/"
DOUBLE_SPACE = "S"
TRIPLE_SPACE = "T"

_SPACING = {SINGLE_SPACE: 1,
            DOUBLE_SPACE: 2,
            TRIPLE_SPACE: 3,
            }


class Tape:
    """Carriage-control tape built from a skip specification.

    The specification is a comma-separated list of line:channel
    entries, for example "0:H,3:A,65:C". A line of 0 (or less) is
    the bottom of the form and is punched as line 66.
    """

    def __init__(self, spec=DEFAULT_TAPE):
        self.spec = spec
        self.table = self.build(spec)

    def resolve(self, line, code):
        """Resolve a carriage-control code at the input line.

        Returns (destination, blank lines to emit after the text).
        The destination may be above LAST_LINE, which means a skip to
        the next page.
        """
        spacing = _SPACING.get(code)
        if spacing:
            dest = line + spacing
        elif code in _CHANNEL_SET:
            dest = self.table[line][code]
        else:
            _logger.warning("Unrecognized carriage control %r at line %d",
                            code, line)
            dest = line + 1

        return dest, dest - line - 1

    # Static methods

    @staticmethod
    def build(spec):
        """Build the skip table for a tape specification.

        Returns a list, indexed by line, of dicts mapping channel to
        destination line.
        """
        punches = {channel: [] for channel in CHANNELS}
        for line, channel in parse(spec):
            if line <= 0:
                line = PAGE_LINES  # bottom of form

            punches[channel].append(line)

        table = [{} for _ in range(PAGE_LINES)]
        for channel, stops in punches.items():
            if not stops:
                # unpunched channel acts like a single space
                for line, dests in enumerate(table):
                    dests[channel] = line + 1

                continue

            stops.sort()
            for line, dests in enumerate(table):
                for stop in stops:
                    if stop > line:
                        dests[channel] = stop
                        break
                else:
                    # past the last punch, wrap to the first punch
                    dests[channel] = stops[0] + PAGE_LINES

        return table


def parse(spec):
    """Parse a tape specification into (line, channel) tuples.
    """
    entries = []
    for entry in spec.split(","):
        entry = entry.strip()
        if not entry:
            continue

        try:
            line, channel = entry.split(":")
            line = int(line)

        except Exception as exc:
            raise ValueError(f"Not a line:channel value: {entry!r}") from exc

        channel = channel.strip().upper()
        if len(channel) != 1 or channel not in CHANNELS:
            raise ValueError(f"Channel must be one of {CHANNELS}: {entry!r}")

        if line > PAGE_LINES:
            raise ValueError(f"Line must not exceed {PAGE_LINES}: {entry!r}")

        entries.append((line, channel))

    return entries


# Private data

_CHANNEL_SET = frozenset(CHANNELS)
_logger = logging.getLogger("rje.tape")
