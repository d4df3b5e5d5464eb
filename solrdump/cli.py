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

import argparse
import configparser
import logging
import sys
import warnings
from datetime import datetime

import urllib3
from tqdm import tqdm

from solrdump import __version__
from solrdump.exceptions import ConfigurationException, SolrDumpException
from solrdump.paginator import Paginator
from solrdump.transport import build_transport

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(threadName)s] [%(levelname)s] [%(name)s::%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# section -> option -> (dest, type)
CONFIG_OPTIONS = {
    'solr': {
        'server': ('server', str),
        'fl': ('fields', str),
        'q': ('query', str),
        'rows': ('rows', int),
        'sort': ('sort', str),
        'wt': ('wt', str),
        'timeout': ('timeout', float),
    },
    'kerberos': {
        'keytab': ('keytab', str),
        'principal': ('principal', str),
    }
}

# flags that take a value; the value may itself start with a dash (-q -type:deleted)
VALUE_FLAGS = frozenset(
    prefix + name
    for name in ('config', 'server', 'fl', 'q', 'rows', 'sort', 'wt', 'keytab', 'principal', 'timeout')
    for prefix in ('-', '--')
)


def init_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, stream=sys.stderr)

    logging.getLogger('solrdump').setLevel(level)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests_gssapi').setLevel(logging.WARNING)


def read_config(path) -> dict:
    """
    Read argument defaults from an INI file.

    Example::

        [solr]
        server = https://solr.example.com:8983/solr/collection1
        rows = 5000

        [kerberos]
        keytab = /etc/security/keytabs/solr.keytab
        principal = solr@EXAMPLE.COM
    """
    config = configparser.ConfigParser(interpolation=None)

    try:
        with open(path) as f:
            config.read_file(f)
    except (OSError, configparser.Error) as e:
        raise ConfigurationException(f'Unable to read config file {path}: {e}')

    defaults = {}

    for section, options in CONFIG_OPTIONS.items():
        if not config.has_section(section):
            continue

        for option, (dest, val_type) in options.items():
            if not config.has_option(section, option):
                continue

            value = config.get(section, option)

            try:
                defaults[dest] = val_type(value)
            except ValueError:
                raise ConfigurationException(f'Invalid value for [{section}] {option}: {value!r}')

    return defaults


def join_values(argv):
    """
    Rewrite `-flag value` pairs as `-flag=value` so that argparse takes the next
    argument verbatim, even when it starts with a dash.
    """
    joined = []
    args = iter(argv)

    for arg in args:
        if arg in VALUE_FLAGS:
            value = next(args, None)
            if value is not None:
                arg = f'{arg}={value}'
        joined.append(arg)

    return joined


def parse_args(argv=None):
    argv = join_values(sys.argv[1:] if argv is None else argv)

    conf_parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)

    conf_parser.add_argument('-config', '--config',
                             help='INI file providing defaults for the options below.',
                             required=False,
                             dest='config',
                             metavar='FILE')

    known, _ = conf_parser.parse_known_args(argv)

    parser = argparse.ArgumentParser(description='Export all documents matching a query from a SOLR collection '
                                                 'as JSON lines, using cursorMark deep paging.',
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter,
                                     parents=[conf_parser],
                                     allow_abbrev=False)

    parser.add_argument('-server', '--server',
                        help='SOLR server, host, port and collection',
                        default='http://localhost:8983/solr/example',
                        dest='server')

    parser.add_argument('-fl', '--fl',
                        help='field or fields to export, separate multiple values by comma',
                        default='',
                        dest='fields')

    parser.add_argument('-q', '--q',
                        help='SOLR query',
                        default='*:*',
                        dest='query',
                        metavar='QUERY')

    parser.add_argument('-rows', '--rows',
                        help='number of rows returned per request',
                        default=1000,
                        type=int,
                        dest='rows')

    parser.add_argument('-sort', '--sort',
                        help='sort order (only unique fields allowed)',
                        default='id asc',
                        dest='sort')

    parser.add_argument('-wt', '--wt',
                        help='output format',
                        default='json',
                        dest='wt')

    parser.add_argument('-verbose', '--verbose',
                        help='show progress',
                        action='store_true',
                        dest='verbose')

    parser.add_argument('-version', '--version',
                        help='show version and exit',
                        action='version',
                        version=__version__)

    parser.add_argument('-k', '--insecure',
                        help='skip certificate verification',
                        action='store_true',
                        dest='insecure')

    parser.add_argument('-keytab', '--keytab',
                        help='Kerberos keytab to use for authentication',
                        default=None,
                        dest='keytab')

    parser.add_argument('-principal', '--principal',
                        help='Kerberos principal to use for authentication',
                        default=None,
                        dest='principal')

    parser.add_argument('-timeout', '--timeout',
                        help='timeout in seconds for each request',
                        default=None,
                        type=float,
                        dest='timeout')

    parser.add_argument('-progress', '--progress',
                        help='show a progress bar on stderr',
                        action='store_true',
                        dest='progress')

    if known.config:
        parser.set_defaults(**read_config(known.config))

    return parser.parse_args(argv)


def dump(args, out=None) -> int:
    with warnings.catch_warnings():
        if args.insecure:
            warnings.simplefilter('ignore', urllib3.exceptions.InsecureRequestWarning)
            logger.warning('Certificate verification is disabled')

        return _dump(args, out)


def _dump(args, out=None) -> int:
    with build_transport(keytab=args.keytab, principal=args.principal,
                         verify=not args.insecure, timeout=args.timeout) as transport:
        paginator = Paginator(transport, args.server,
                              query=args.query,
                              sort=args.sort,
                              rows=args.rows,
                              fields=args.fields,
                              wt=args.wt)

        if not args.progress:
            return paginator.dump(out)

        with tqdm(desc='Documents', unit=' docs', file=sys.stderr) as progress:
            return paginator.dump(out, progress=progress)


def main(argv=None) -> int:
    start = datetime.now()

    try:
        args = parse_args(argv)
    except ConfigurationException as e:
        init_logging()
        logger.error(e.reason)
        return e.code

    init_logging(args.verbose)

    try:
        dump(args)
    except SolrDumpException as e:
        logger.error(e.reason)
        return e.code
    except KeyboardInterrupt:
        logger.warning('Interrupted')
        return 130

    logger.debug(f'Exiting. Run time = {datetime.now() - start}')

    return 0
