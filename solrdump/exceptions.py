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


class StandardDumpErrors:
    UNKNOWN = 1000
    TRANSPORT = 1001
    HTTP_STATUS = 1002
    DECODE = 1003
    UNSUPPORTED_FORMAT = 1004
    CONFIGURATION = 1005


# exit code 2 belongs to argparse usage errors
class SolrDumpException(Exception):
    def __init__(self, error=StandardDumpErrors.UNKNOWN, reason="", code=1):
        self.error = error
        self.reason = reason
        self.code = code
        Exception.__init__(self, reason)


class TransportException(SolrDumpException):
    def __init__(self, reason="Request could not be sent", cause=None):
        SolrDumpException.__init__(self, StandardDumpErrors.TRANSPORT, reason, code=3)
        self.cause = cause


class HTTPStatusException(SolrDumpException):
    def __init__(self, status, status_reason="", body=""):
        SolrDumpException.__init__(self, StandardDumpErrors.HTTP_STATUS, f'{status} {status_reason}'.strip(), code=4)
        self.status = status
        self.body = body


class DecodeException(SolrDumpException):
    def __init__(self, reason="Response could not be decoded"):
        SolrDumpException.__init__(self, StandardDumpErrors.DECODE, reason, code=5)


class UnsupportedFormatException(SolrDumpException):
    def __init__(self, wt):
        SolrDumpException.__init__(self, StandardDumpErrors.UNSUPPORTED_FORMAT, f'wt={wt} not implemented', code=6)
        self.wt = wt


class ConfigurationException(SolrDumpException):
    def __init__(self, reason="Invalid configuration"):
        SolrDumpException.__init__(self, StandardDumpErrors.CONFIGURATION, reason, code=7)
