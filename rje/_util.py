"""rje utility functions

Usage: from . import _util

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""

__author__ = "Neil Johnson"

CARD_WIDTH = 80
DEFAULT_PORT = 3780


def card_image(text, width=CARD_WIDTH):
    """Pad with blanks or truncate text to a card image.
    """
    text = text.rstrip("\r\n")
    return text[:width].ljust(width)


def job_number(value):
    """Validate a job number.
    A job number is exactly six decimal digits. Integers are
    accepted and zero filled.
    """
    if isinstance(value, int):
        value = f"{value:06d}"

    value = str(value).strip()
    if len(value) != 6 or not value.isdigit():
        raise ValueError(f"Job number must be 6 digits: {value!r}")

    return value


def host_port(value, port=DEFAULT_PORT):
    """Split hostname[:port] into host, port.
    """
    host, sep, port_str = value.rpartition(":")
    if not sep:
        return value, port

    try:
        return host, int(port_str)

    except Exception as exc:
        raise ValueError(f"Not a hostname[:port] value: {value!r}") from exc
