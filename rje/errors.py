"""rje exceptions

Usage: from .errors import RjeError

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""

__author__ = "Neil Johnson"


class RjeError(RuntimeError):
    """General rje error.
    """


class TransportDisconnect(RjeError):
    """The connection to the host was lost.
    """


class ProtocolDisconnect(RjeError):
    """The host ended the transmission with EOT.
    """


class ProtocolError(RjeError):
    """Control sequence not recognized.
    """


class NegativeAcknowledgement(RjeError):
    """The host rejected a block (NAK).
    """


class SinkError(RjeError):
    """Print or punch output could not be written.
    """
