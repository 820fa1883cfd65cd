"""Host card code translation

Usage: from . import codec

The translation tables come from the Python codec registry. The
ebcdic package (imported by the rje package) registers the EBCDIC
code pages that Python does not provide, such as cp1047.

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
import codecs
import re

__author__ = "Neil Johnson"

DEFAULT_CODE_PAGE = "cp1047"


class Codec:
    """Translate between local text and host card code.
    """

    def __init__(self, encoding=DEFAULT_CODE_PAGE):
        code_page = re.findall("\\d+$", encoding)
        if len(code_page) != 1:
            raise ValueError("Does not end in code page number")

        self.codec_info = codecs.lookup(encoding)
        self.encoding = encoding
        self.code_page = int(code_page[0])

    def encode(self, text):
        """Translate text to host card code bytes.
        """
        return self.codec_info.encode(text)[0]

    def decode(self, data):
        """Translate host card code bytes to text.
        """
        return self.codec_info.decode(bytes(data), "replace")[0]
