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

import json
import os
from urllib.parse import parse_qs, urlparse

import pytest
import requests_mock

from solrdump.transport import HttpTransport

SOLR_URL = 'http://solr.test/solr/collection1'


def pytest_addoption(parser):
    parser.addoption("--solr-host", action="store", default=None,
                     help="SOLR collection URL to run the live tests against")


@pytest.fixture(scope="session")
def solr_host(request):
    return request.config.getoption("--solr-host") or os.getenv('SOLR_HOST')


def page_body(docs, next_cursor_mark, cursor_mark='*', num_found=None, start=0):
    """
    Build a SOLR select response by hand so that the document text is exactly
    the text given in `docs`.
    """
    if num_found is None:
        num_found = len(docs)

    return (
        '{"responseHeader":{"status":0,"QTime":3,"params":{"q":"*:*","cursorMark":%s,"sort":"id asc","rows":"2",'
        '"wt":"json"}},"response":{"numFound":%d,"start":%d,"docs":[%s]},"nextCursorMark":%s}'
        % (json.dumps(cursor_mark), num_found, start, ','.join(docs), json.dumps(next_cursor_mark))
    )


class FakeSolr(object):
    """requests-mock callback answering select requests by cursorMark."""

    def __init__(self):
        self.pages = {}
        self.cursor_marks = []

    def add_page(self, cursor_mark, body, status=200):
        self.pages[cursor_mark] = (status, body)

    def __call__(self, request, context):
        query = parse_qs(urlparse(request.url).query, keep_blank_values=True)
        cursor_mark = query['cursorMark'][0]
        self.cursor_marks.append(cursor_mark)

        status, body = self.pages[cursor_mark]
        context.status_code = status
        context.headers['Content-Type'] = 'application/json;charset=utf-8'

        return body


@pytest.fixture
def fake_solr():
    return FakeSolr()


@pytest.fixture
def adapter(fake_solr):
    adapter = requests_mock.Adapter()
    adapter.register_uri('GET', SOLR_URL + '/select', text=fake_solr)

    return adapter


@pytest.fixture
def transport(adapter):
    transport = HttpTransport()
    transport.session.mount('http://', adapter)

    yield transport

    transport.close()
