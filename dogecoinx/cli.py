# Copyright (c) 2024, Neil Booth
#
# All rights reserved.
#

'''Command line entry point: perform a handshake with a single peer.'''

import argparse
import logging
import sys

from .consts import DEFAULT_USER_AGENT
from .errors import FormatError, ParameterError, ProtocolError, TransportError
from .handshake import Handshake
from .net import validate_port
from .networks import networks_by_name


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='dogecoinx-handshake',
        description='Perform a version/verack handshake with a dogecoin node',
        epilog='Example: dogecoinx-handshake 52.77.231.41 44556',
    )
    parser.add_argument('ip', help='IPv4 address of the node, e.g. 52.77.231.41')
    parser.add_argument('port', nargs='?', type=validate_port,
                        help="TCP port of the node (default: the network's default port)")
    parser.add_argument('--network', choices=sorted(networks_by_name), default='testnet',
                        help='network the node is on (default: testnet)')
    parser.add_argument('--timeout', type=float, default=Handshake.CONNECTION_TIMEOUT,
                        help='seconds to wait for the node before giving up '
                        f'(default: {Handshake.CONNECTION_TIMEOUT})')
    parser.add_argument('--user-agent', default=DEFAULT_USER_AGENT,
                        help=f'user agent to announce (default: {DEFAULT_USER_AGENT})')
    parser.add_argument('-v', '--verbose', action='store_true', help='log raw traffic')
    return parser.parse_args(argv)


def main(argv=None):
    '''Return 0 if the handshake completed, otherwise 1.'''
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s:%(name)s:%(message)s', stream=sys.stderr)
    logger = logging.getLogger('dogecoinx')

    network = networks_by_name[args.network]
    port = args.port or network.default_port
    logger.info(f'connecting to {args.ip}:{port} on {network.full_name}')
    try:
        with Handshake.connect(network, args.ip, port, timeout=args.timeout,
                               user_agent=args.user_agent) as handshake:
            handshake.perform()
    except (FormatError, ParameterError, ProtocolError, TransportError) as e:
        logger.error(f'handshake with {args.ip}:{port} failed: {e}')
        return 1
    logger.info('correct verack received, closing')
    return 0
