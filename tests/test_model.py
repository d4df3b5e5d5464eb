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

import pytest

from solrdump.exceptions import DecodeException
from solrdump.model import PageResponse, raw_documents

SOLR_RESPONSE = '''{
  "responseHeader":{
    "zkConnected":true,
    "status":0,
    "QTime":7,
    "params":{
      "q":"*:*",
      "cursorMark":"*",
      "sort":"id asc",
      "rows":"2"}},
  "response":{"numFound":42,"start":0,"numFoundExact":true,"docs":[
      {
        "id":"doc-1",
        "title":["Solr in Action"],
        "_version_":1712345678901234567},
      {
        "id":"doc-2",
        "title":["Lucene ] { tricky"],
        "_version_":1712345678901234568}]
  },
  "nextCursorMark":"AoEmZG9jLTI="}'''


def test_from_text():
    page = PageResponse.from_text(SOLR_RESPONSE)

    assert page.num_found == 42
    assert page.start == 0
    assert page.next_cursor_mark == 'AoEmZG9jLTI='
    assert page.header.status == 0
    assert page.header.qtime == 7
    assert page.header.params['sort'] == 'id asc'
    assert len(page) == 2


def test_raw_documents_keep_their_text():
    docs = raw_documents(SOLR_RESPONSE)

    assert docs[0] == ('{\n        "id":"doc-1",\n        "title":["Solr in Action"],\n'
                       '        "_version_":1712345678901234567}')
    assert docs[1].startswith('{\n        "id":"doc-2"')
    assert docs[1].endswith('"_version_":1712345678901234568}')


def test_raw_documents_last_duplicate_wins():
    text = '{"response":{"docs":[{"id":"old"}]},"response":{"docs":[1, "two" ,{"id":"new"}],"docs":[{"id":"last"}]}}'

    assert raw_documents(text) == ['{"id":"last"}']


def test_raw_documents_of_scalars():
    text = '{"response": {"docs": [ 1 , "two",null,  [3] ]}}'

    assert raw_documents(text) == ['1', '"two"', 'null', '[3]']


def test_missing_sections_decode_to_defaults():
    page = PageResponse.from_text('{}')

    assert page.docs == []
    assert page.num_found == 0
    assert page.next_cursor_mark == ''
    assert page.header.params == {}


def test_response_without_docs():
    page = PageResponse.from_text('{"response":{"numFound":0,"start":0},"nextCursorMark":"*"}')

    assert page.docs == []
    assert page.next_cursor_mark == '*'


@pytest.mark.parametrize('text', [
    '',
    '{"response":',
    '{"response":{"docs":[]}} trailing',
    '{"response":{"docs":[{"id":"a\rb"}]}}',
    '[]',
    '{"response":[]}',
    '{"response":{"docs":{}}}',
    '{"response":{"numFound":"many"}}',
    '{"nextCursorMark":5}',
])
def test_invalid_bodies(text):
    with pytest.raises(DecodeException):
        PageResponse.from_text(text)


def test_from_bytes_rejects_invalid_utf8():
    with pytest.raises(DecodeException):
        PageResponse.from_bytes(b'{"response":{"docs":[{"id":"\xff"}]}}')


def test_from_bytes():
    page = PageResponse.from_bytes('{"response":{"docs":[{"id":"é"}]},"nextCursorMark":"*"}'.encode('utf-8'))

    assert page.docs == ['{"id":"é"}']


def test_null_envelope_values_decode_to_defaults():
    page = PageResponse.from_text('{"response":{"numFound":null,"start":null,"docs":[]},"nextCursorMark":null}')

    assert page.num_found == 0
    assert page.start == 0
    assert page.next_cursor_mark == ''
