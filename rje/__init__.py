"""
The rje package joins a remote job entry station with a spooling
host over a bisync (BSC) link. Job decks are submitted as card images
and print and punch output is retrieved.

First modules to look at to use the station APIs:
    rje     session driver (submit and retrieve)
    bsc     control characters and the frame codec
    link    handshake engine and byte channels
    tape    carriage-control tape model

The cli module provides the rje command.

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
__author__ = "Neil Johnson"

import ebcdic as _

try:
    from ._version import __version__

except ImportError:
    __version__ = None
