""" avtime commands """

from typing import Literal
import asyncio

import avtime
from avtime import clock


# Define avtime command function(s)
def run(
    server: str,
    interval: float = avtime.SYNC_INTERVAL,
    timeout: float = avtime.TIME_OUT,
    layout: Literal['dashboard', 'log'] = 'dashboard'
) -> int:
    """ Runs the `avtime` async clock service and returns the exit code.

    Parameters
    ----------
    server : `str`
        The host-name or ip-address of the network time protocol server.
    interval : `float`
        The time interval in seconds between time synchronization.
    timeout : `float`
        The time-out in seconds for the network time protocol request.
    layout : `Literal['dashboard', 'log']`
        The arrangement of the terminal display.

    Examples
    --------
    ``` console
    avtime pool.ntp.org
    ```

    """

    # Initialize the clock service
    service = clock.Service(
        server=server,
        interval=interval,
        timeout=timeout,
        layout=layout
    )

    # Run services
    try:
        asyncio.run(service.run())

    except avtime.ntp.SyncError as e:

        # Logging
        service.logger.error(
            '[%s] Initial synchronization failed, %s' % (
                type(e).__name__,
                str(e)
            )
        )
        return e.code

    except avtime.terminal.TerminalError as e:

        # Logging
        service.logger.error(
            '[%s] %s' % (
                type(e).__name__,
                str(e)
            )
        )
        return e.code

    except KeyboardInterrupt:

        # Logging
        service.logger.info('Shutting down the clock service.')

    # Logging
    service.logger.info('The clock service exited successfully.')

    return 0
