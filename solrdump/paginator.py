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
Deep paging through a Solr collection with cursorMark.

https://solr.apache.org/guide/solr/latest/query-guide/pagination-of-results.html
"""
import logging
import sys
from typing import Iterator
from urllib.parse import urlencode

from solrdump.exceptions import HTTPStatusException, UnsupportedFormatException
from solrdump.model import PageResponse
from solrdump.transport import Transport

logger = logging.getLogger(__name__)

CURSOR_START = '*'
SUPPORTED_WT = 'json'
PLACEHOLDER_BODY = b'{"method":""}'


def prepend_schema(server: str) -> str:
    if not server.startswith('http'):
        return f'http://{server}'
    return server


class Paginator(object):
    def __init__(self, transport: Transport, server, query='*:*', sort='id asc', rows=1000, fields='', wt=SUPPORTED_WT):
        if wt != SUPPORTED_WT:
            raise UnsupportedFormatException(wt)

        self.transport = transport
        self.server = prepend_schema(server).rstrip('/')
        self.query = query
        self.sort = sort
        self.rows = rows
        self.fields = fields
        self.wt = wt

    def params(self, cursor_mark=CURSOR_START) -> dict:
        return {
            'q': self.query,
            'sort': self.sort,
            'rows': str(self.rows),
            'fl': self.fields,
            'wt': self.wt,
            'cursorMark': cursor_mark,
        }

    def link(self, cursor_mark=CURSOR_START) -> str:
        return '{}/select?{}'.format(self.server, urlencode(sorted(self.params(cursor_mark).items())))

    def fetch(self, cursor_mark=CURSOR_START) -> PageResponse:
        link = self.link(cursor_mark)
        logger.debug(link)

        response = self.transport.send('GET', link, data=PLACEHOLDER_BODY)

        try:
            if response.status_code >= 400:
                body = response.text
                logger.error(f'response body ({len(body)}): {body}')
                raise HTTPStatusException(response.status_code, response.reason, body)

            return PageResponse.from_bytes(response.content)
        finally:
            response.close()

    def pages(self) -> Iterator[PageResponse]:
        """
        Yield every page of the result set.

        Stops once Solr hands back the cursor mark it was sent; the number of
        pages is never computed up front.
        """
        cursor_mark = CURSOR_START

        while True:
            page = self.fetch(cursor_mark)
            yield page

            if page.next_cursor_mark == cursor_mark:
                break

            cursor_mark = page.next_cursor_mark

    def dump(self, out=None, progress=None) -> int:
        """
        Write every document to `out` (stdout by default), one per line, and
        return how many were written.

        `progress` is an optional tqdm bar; its total is set from the first
        page's numFound.
        """
        if out is None:
            out = sys.stdout

        total = 0

        for page in self.pages():
            for doc in page.docs:
                out.write(doc)
                out.write('\n')

            total += len(page)
            logger.debug(f'fetched {len(page):,} docs ( -> {total:,} of {page.num_found:,})')

            if progress is not None:
                if progress.total is None:
                    progress.total = page.num_found
                    progress.refresh()
                progress.update(len(page))

        out.flush()
        logger.debug(f'fetched {total:,} docs')

        return total
