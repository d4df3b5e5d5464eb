# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Decoding of Solr select responses.

Documents are kept as the exact JSON text they had in the response body so they
can be written out without being re-serialized; only the envelope (header,
counts and cursor mark) is turned into Python values.
"""
import json
import re
from collections import namedtuple
from typing import Iterator, List, Tuple

from solrdump.exceptions import DecodeException

WHITESPACE = re.compile(r'[ \t\n\r]*')

ResponseHeader = namedtuple('ResponseHeader', ('status', 'qtime', 'params'))
ResponseHeader.__new__.__defaults__ = (0, 0, {})

_decoder = json.JSONDecoder()


class PageResponse(object):
    def __init__(self, header=None, num_found=0, start=0, docs=None, next_cursor_mark=''):
        self.header = header if header is not None else ResponseHeader()
        self.num_found = num_found
        self.start = start
        self.docs = docs if docs is not None else []
        self.next_cursor_mark = next_cursor_mark

    def __len__(self):
        return len(self.docs)

    def __repr__(self):
        return 'PageResponse(num_found={}, start={}, docs={}, next_cursor_mark={!r})'.format(
            self.num_found, self.start, len(self.docs), self.next_cursor_mark)

    @staticmethod
    def from_bytes(body: bytes) -> 'PageResponse':
        try:
            text = body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DecodeException(f'decode: {e}')

        return PageResponse.from_text(text)

    @staticmethod
    def from_text(text: str) -> 'PageResponse':
        """
        Decode a Solr JSON response body.

        The whole body is validated first, so a malformed page raises
        `DecodeException` before any of its documents are handed out.
        """
        try:
            parsed = json.loads(text)
        except ValueError as e:
            raise DecodeException(f'decode: {e}')

        if not isinstance(parsed, dict):
            raise DecodeException(f'decode: expected a JSON object, got {type(parsed).__name__}')

        header = _header(parsed.get('responseHeader'))

        response = parsed.get('response')
        if response is None:
            response = {}
        elif not isinstance(response, dict):
            raise DecodeException('decode: "response" is not an object')

        docs = response.get('docs')
        if docs is None:
            raw_docs = []
        elif not isinstance(docs, list):
            raise DecodeException('decode: "response.docs" is not an array')
        else:
            raw_docs = raw_documents(text)

        # null decodes to the zero value
        next_cursor_mark = parsed.get('nextCursorMark')
        if next_cursor_mark is None:
            next_cursor_mark = ''
        if not isinstance(next_cursor_mark, str):
            raise DecodeException('decode: "nextCursorMark" is not a string')

        return PageResponse(
            header=header,
            num_found=_int(response.get('numFound', 0), 'numFound'),
            start=_int(response.get('start', 0), 'start'),
            docs=raw_docs,
            next_cursor_mark=next_cursor_mark
        )


def raw_documents(text: str) -> List[str]:
    """
    Return the text of every element of `response.docs`, verbatim.

    `text` must already be known to be valid JSON. When a key occurs more than
    once the last occurrence wins, as it does for `json.loads`.
    """
    response_span = None

    for key, start, end in _members(text, _skip(text, 0)):
        if key == 'response':
            response_span = (start, end)

    if response_span is None:
        return []

    docs_start = None

    for key, start, end in _members(text, response_span[0]):
        if key == 'docs':
            docs_start = start

    if docs_start is None:
        return []

    return [text[start:end] for start, end in _elements(text, docs_start)]


def _skip(text, idx):
    return WHITESPACE.match(text, idx).end()


def _members(text: str, idx: int) -> Iterator[Tuple[str, int, int]]:
    # (key, value start, value end) for the object beginning at idx
    idx = _skip(text, idx + 1)

    if text[idx] == '}':
        return

    while True:
        key, idx = _decoder.raw_decode(text, idx)
        idx = _skip(text, idx)
        idx = _skip(text, idx + 1)  # ':'

        _, end = _decoder.raw_decode(text, idx)
        yield key, idx, end

        idx = _skip(text, end)
        if text[idx] == '}':
            return
        idx = _skip(text, idx + 1)  # ','


def _elements(text: str, idx: int) -> Iterator[Tuple[int, int]]:
    idx = _skip(text, idx + 1)

    if text[idx] == ']':
        return

    while True:
        _, end = _decoder.raw_decode(text, idx)
        yield idx, end

        idx = _skip(text, end)
        if text[idx] == ']':
            return
        idx = _skip(text, idx + 1)


def _header(header) -> ResponseHeader:
    if not isinstance(header, dict):
        return ResponseHeader()

    params = header.get('params')

    return ResponseHeader(
        status=header.get('status', 0),
        qtime=header.get('QTime', 0),
        params=params if isinstance(params, dict) else {}
    )


def _int(value, name):
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeException(f'decode: "{name}" is not an integer')
    return value
