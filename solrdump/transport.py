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

import logging
from abc import ABC, abstractmethod

import requests

from solrdump.exceptions import ConfigurationException, TransportException

logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Sends HTTP requests for the paginator.

    `verify` and `timeout` apply to every request sent through this transport
    and nowhere else.
    """

    def __init__(self, verify=True, timeout=None):
        self.verify = verify
        self.timeout = timeout
        self.__session = None

    @property
    def session(self) -> requests.Session:
        if self.__session is None:
            self.__session = self._create_session()
        return self.__session

    @abstractmethod
    def _create_session(self) -> requests.Session:
        ...

    def send(self, method, url, data=None) -> requests.Response:
        try:
            return self.session.request(method, url, data=data, verify=self.verify, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportException(f'http: {e}', cause=e)

    def close(self):
        if self.__session is not None:
            self.__session.close()
            self.__session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class HttpTransport(Transport):
    def _create_session(self) -> requests.Session:
        return requests.Session()


class KerberosTransport(Transport):
    """
    Transport authenticating through SPNEGO with Kerberos credentials taken from
    a keytab.

    Either argument may be None, in which case the GSSAPI defaults apply
    (default keytab, first principal in it).
    """

    def __init__(self, keytab=None, principal=None, verify=True, timeout=None):
        super().__init__(verify=verify, timeout=timeout)
        self.keytab = keytab
        self.principal = principal

    def _create_session(self) -> requests.Session:
        # gssapi links against the system Kerberos libraries and ships as an extra
        try:
            import gssapi
            from gssapi.exceptions import GSSError
            from requests_gssapi import HTTPSPNEGOAuth
        except ImportError as e:
            raise ConfigurationException(f'Kerberos authentication needs the "kerberos" extra: {e}')

        logger.debug(f'Acquiring Kerberos credentials for {self.principal} from {self.keytab}')

        try:
            name = gssapi.Name(self.principal, gssapi.NameType.kerberos_principal) if self.principal else None
            store = {'client_keytab': self.keytab} if self.keytab else None
            creds = gssapi.Credentials(name=name, usage='initiate', store=store)
        except GSSError as e:
            raise TransportException(f'kerberos: {e}', cause=e)

        session = requests.Session()
        session.auth = HTTPSPNEGOAuth(creds=creds)

        return session


def build_transport(keytab=None, principal=None, verify=True, timeout=None) -> Transport:
    if keytab or principal:
        return KerberosTransport(keytab=keytab, principal=principal, verify=verify, timeout=timeout)

    return HttpTransport(verify=verify, timeout=timeout)
