""" Network time protocol (ntp) synchronizer """

from typing import Union, Literal
import socket
import ntplib

import avtime


# Errors
class SyncError(Exception):
    """ A `class` that represents a failed network time protocol measurement. """
    code: int = avtime.errors.PROTOCOL_ERROR
    kind: str = 'sync'

    def __init__(self, server: str, message: str):
        """ Creates an instance of the synchronization error.

        Parameters
        ----------
        server: `str`
            The network time protocol server.
        message: `str`
            The description of the failure.
        """
        self.server = server
        super().__init__(message)


class ResolutionError(SyncError):
    """ The network time protocol server could not be resolved to an ip-address. """
    code: int = avtime.errors.RESOLUTION_ERROR
    kind: str = 'resolution'


class SyncTimeoutError(SyncError):
    """ The network time protocol server did not respond within the time-out. """
    code: int = avtime.errors.TIMEOUT_ERROR
    kind: str = 'timeout'


class ProtocolError(SyncError):
    """ The network time protocol exchange failed or the response was malformed. """
    code: int = avtime.errors.PROTOCOL_ERROR
    kind: str = 'protocol'


class Synchronizer:
    """ A `class` that represents a network time protocol server. """
    def __init__(
        self,
        server: Union[str, Literal['pool.ntp.org', 'time.cloudflare.com', 'time.google.com']],
        port: int = avtime.NTP_PORT,
        version: int = avtime.NTP_VERSION,
        timeout: float = avtime.TIME_OUT
    ):
        """ An instance of the network time protocol server for measuring the local clock offset.

        Parameters
        ----------
        server: `Union[str, Literal['pool.ntp.org', 'time.cloudflare.com', 'time.google.com']]`
            The host-name or ip-address of the network time protocol server.
        port: `int`
            The network time protocol port.
        version: `int`
            The network time protocol version.
        timeout: `float`
            The time-out in seconds for the network time protocol request.
        """
        self.server = server
        self.port = port
        self.version = version
        self.timeout = timeout
        self.client = ntplib.NTPClient()

    def resolve(self) -> str:
        """ Returns the ip-address of the network time protocol server. """
        try:
            addresses = socket.getaddrinfo(
                self.server,
                self.port,
                type=socket.SOCK_DGRAM,
                proto=socket.IPPROTO_UDP
            )
        except (socket.gaierror, UnicodeError) as e:
            raise ResolutionError(
                self.server,
                'Unable to resolve the ntp server {%s}, %s.' % (self.server, e)
            ) from e

        if not addresses:
            raise ResolutionError(
                self.server,
                'Unable to resolve the ntp server {%s}.' % self.server
            )

        # The socket address is the last element of the first entry, (address, port[, ...])
        return addresses[0][4][0]

    def sync(self, address: str) -> ntplib.NTPStats:
        """ Returns the current time statistics from the network time protocol server.

        Parameters
        ----------
        address: `str`
            The resolved ip-address of the network time protocol server.
        """
        try:
            return self.client.request(
                address,
                version=self.version,
                port=self.port,
                timeout=self.timeout
            )
        except ntplib.NTPException as e:

            # `ntplib` reports a socket time-out as an `NTPException` raised while handling it
            if isinstance(e.__context__, socket.timeout):
                raise SyncTimeoutError(
                    self.server,
                    'The ntp server {%s} did not respond within %.2f [sec.].' % (
                        self.server,
                        self.timeout
                    )
                ) from e

            raise ProtocolError(
                self.server,
                'Communication with the ntp server {%s} failed, %s' % (self.server, e)
            ) from e
        except TimeoutError as e:
            raise SyncTimeoutError(
                self.server,
                'The ntp server {%s} did not respond within %.2f [sec.].' % (
                    self.server,
                    self.timeout
                )
            ) from e
        except OSError as e:
            raise ProtocolError(
                self.server,
                'Communication with the ntp server {%s} failed, %s.' % (self.server, e)
            ) from e

    def offset(self) -> float:
        """ Returns the offset in seconds between the network time protocol server and the
        local machine time. The offset is the server time minus the local time, so the
        corrected time is the local time plus the offset.
        """
        return self.sync(self.resolve()).offset
