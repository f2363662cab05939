""" avtime

`avtime` is a terminal clock that displays the local time corrected by the offset
measured against a network time protocol (ntp) server.
"""

from typing import List
import errno

# Logo
LOGO: List[str] = [
    r"                _   _                ",
    r"  __ ___   __  | |_(_)_ __ ___   ___ ",
    r" / _` \ \ / /  | __| | '_ ` _ \ / _ \\",
    r"| (_| |\ V /   | |_| | | | | | |  __/",
    r" \__,_| \_/     \__|_|_| |_| |_|\___|"
]
NAME: str = 'avtime'
DESCRIPTION: str = ''.join([
    '`avtime` is a terminal clock that displays the local time corrected by the',
    ' offset measured against a network time protocol (ntp) server.'
])

# Network configuration
NTP_PORT: int = 123  # The network time protocol port
NTP_VERSION: int = 3  # The network time protocol version

# Synchronization configuration
SYNC_INTERVAL: float = 10  # The time interval in seconds between time synchronization
TIME_OUT: float = 5  # The time-out in seconds for the network time protocol request
STALE_THRESHOLD: int = 30  # The time in seconds after which synchronization is stale
NEVER_SYNCED: int = 9999  # The saturated time in seconds since synchronization

# Display configuration
FRAME_INTERVAL: float = 0.01  # The time interval in seconds between rendered frames
LAYOUTS: List[str] = ['dashboard', 'log']


# Errors
class errors:
    """ A `class` that represents static error codes. """
    RESOLUTION_ERROR: int = errno.EHOSTUNREACH
    TIMEOUT_ERROR: int = errno.ETIMEDOUT
    PROTOCOL_ERROR: int = errno.EPROTO
    DEVICE_ERROR: int = errno.EIO


# Sub-modules read the configuration above when imported
from avtime import logging, ntp, sync, presentation, terminal  # noqa: E402

__all__ = ['logging', 'ntp', 'sync', 'presentation', 'terminal']
