""" Command-line utility """

import sys
import argparse

import avtime
from avtime.cli import commands


# Define argument type function(s)
def server(value: str) -> str:
    """ Returns the network time protocol server host-name or ip-address.

    The server is always queried on the network time protocol port, a `host:port` value
    is rejected. IPv6 addresses, which contain more than one colon, are accepted.
    """
    value = value.strip()
    if not value:
        raise argparse.ArgumentTypeError('The ntp server must not be empty.')
    if value.count(':') == 1:
        raise argparse.ArgumentTypeError(
            'Invalid ntp server {%s}. The server must not include a port.' % value
        )
    return value


def seconds(value: str) -> float:
    """ Returns a positive number of seconds. """
    try:
        value_ = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError('Invalid number of seconds {%s}.' % value)
    if value_ <= 0:
        raise argparse.ArgumentTypeError(
            'Invalid number of seconds {%s}. The value must be greater than 0.' % value
        )
    return value_


# Define avtime CLI tool function(s)
def main(argv=None) -> int:
    """
    usage: avtime [-h] [--interval SECONDS] [--timeout SECONDS] [--layout {dashboard,log}] server

    NTP-synchronized time display.

    positional arguments:
    server                NTP server address (e.g., time.google.com or pool.ntp.org)

    options:
    -h, --help            show this help message and exit
    --interval SECONDS    The time interval in seconds between time synchronization.
    --timeout SECONDS     The time-out in seconds for the ntp request.
    --layout {dashboard,log}
                          The arrangement of the terminal display.

    Press `q` to quit.
    """

    # Setup CLI argument option(s)
    _ARG_PARSER = argparse.ArgumentParser(
        prog='avtime',
        description='NTP-synchronized time display.',
        epilog='Press `q` to quit.'
    )
    _ARG_PARSER.add_argument(
        'server',
        help='NTP server address (e.g., time.google.com or pool.ntp.org)',
        type=server
    )
    _ARG_PARSER.add_argument(
        '--interval',
        help='The time interval in seconds between time synchronization.',
        type=seconds,
        default=avtime.SYNC_INTERVAL,
        metavar='SECONDS'
    )
    _ARG_PARSER.add_argument(
        '--timeout',
        help='The time-out in seconds for the ntp request.',
        type=seconds,
        default=avtime.TIME_OUT,
        metavar='SECONDS'
    )
    _ARG_PARSER.add_argument(
        '--layout',
        help='The arrangement of the terminal display.',
        type=str,
        choices=avtime.LAYOUTS,
        default='dashboard'
    )

    # Parse arguments
    _ARGS = _ARG_PARSER.parse_args(argv)

    # Execute command
    return commands.run(**vars(_ARGS))


if __name__ == '__main__':
    sys.exit(main())
