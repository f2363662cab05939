""" Clock service """

from typing import Literal, Optional
import asyncio

import avtime
from avtime import presentation
from avtime.sync import EPOCH, Snapshot
from avtime.terminal import Frame


def build_frame(
    snapshot: Snapshot,
    interval: float = avtime.SYNC_INTERVAL
) -> Frame:
    """ Returns the frame that renders a snapshot of the synchronization state.

    Parameters
    ----------
    snapshot: `avtime.sync.Snapshot`
        The consistent read of the synchronization state.
    interval: `float`
        The time interval in seconds between time synchronization.
    """
    adjusted = snapshot.adjusted_time
    local = adjusted.astimezone()
    age = snapshot.seconds_since_sync

    if snapshot.last_sync_at == EPOCH:
        sync = 'never'
    else:
        sync = '%ds ago (next in %ds)' % (age, presentation.next_sync_in(age, interval))

    return Frame(
        server=snapshot.server,
        date=presentation.format_date(local),
        time=presentation.format_time(local),
        local=presentation.format_timestamp(local),
        utc=presentation.format_timestamp(adjusted),
        offset=presentation.format_offset(snapshot.offset),
        offset_severity=presentation.offset_severity(snapshot.offset),
        sync=sync,
        freshness=presentation.freshness(age),
        freshness_severity=presentation.freshness_severity(age),
        gauge=presentation.gauge_ratio(age)
    )


class Service():
    """ A `class` that represents the `avtime` clock service.

    The clock service runs the following tasks within an async event loop,
        - Network time protocol (ntp) synchronization in the background
        - The terminal display of the corrected time and the synchronization freshness

    The clock service can be run from the command-line,

    ``` bash
    avtime pool.ntp.org
    ```

    Or, through a Python session,

    ``` python
    import asyncio
    import avtime.clock

    if __name__ == '__main__':
        asyncio.run(avtime.clock.Service('pool.ntp.org').run())
    ```

    """

    def __init__(
        self,
        server: str,
        interval: float = avtime.SYNC_INTERVAL,
        timeout: float = avtime.TIME_OUT,
        layout: Literal['dashboard', 'log'] = 'dashboard',
        manager: Optional[avtime.sync.Manager] = None,
        terminal: Optional[avtime.terminal.Terminal] = None
    ):
        """ Initializes an instance of the `avtime` clock service.

        Parameters
        ----------
        server: `str`
            The host-name or ip-address of the network time protocol server.
        interval: `float`
            The time interval in seconds between background time synchronization.
        timeout: `float`
            The time-out in seconds for the network time protocol request.
        layout: `Literal['dashboard', 'log']`
            The arrangement of the terminal display.
        manager: `avtime.sync.Manager`
            The shared synchronization state, created for `server` when omitted.
        terminal: `avtime.terminal.Terminal`
            The terminal session, created for `layout` when omitted.
        """

        # Logging
        self.logger = avtime.logging.get_clock_logger()

        # Initialize time synchronization

        # The manager is shared by the background ntp synchronizer, which replaces the offset,
        #   and the display, which reads it. Neither task owns the manager.

        self.manager: avtime.sync.Manager = manager or avtime.sync.Manager(
            avtime.ntp.Synchronizer(server=server, timeout=timeout)
        )
        self.interval = interval

        # Initialize the terminal display
        self.terminal: avtime.terminal.Terminal = terminal or avtime.terminal.Terminal(layout=layout)

        # The background ntp synchronizer is never awaited, the reference only keeps the task alive
        self.ntp_synchronizer_task: Optional[asyncio.Task] = None

    async def ntp_synchronizer(self):
        """ The async `micro-service` for network time protocol (ntp) synchronization.

        The synchronizer waits for the synchronization interval and then refreshes the offset,
        forever until the task is either cancelled by the event loop or cancelled manually through
        `KeyboardInterrupt`. Failed synchronizations are skipped, the display shows them as a
        growing synchronization age.
        """

        while True:
            try:

                # Wait, yielding to the display in the event loop
                await asyncio.sleep(self.interval)

                # Update the offset from the network time protocol (ntp) server
                await self.manager.refresh()

                # Logging
                self.logger.debug(
                    'The ntp time offset is %+d [ms].' % (
                        self.manager.offset
                    )
                )

            except avtime.ntp.SyncError as e:

                # Logging
                self.logger.debug(
                    ''.join([
                        '[%s] Communication with the ntp server {%s} failed,' % (
                            type(e).__name__,
                            self.manager.server
                        ),
                        ' retrying in %.2f [sec.].' % (
                            self.interval
                        )
                    ])
                )

            except (
                asyncio.CancelledError,  # Clock services cancelled
                KeyboardInterrupt  # Clock services cancelled manually
            ):

                # Logging
                self.logger.debug(
                    'Communication with the ntp server {%s} cancelled.' % (
                        self.manager.server
                    )
                )

                # Exit the loop
                break

    def start_ntp_synchronizer(self) -> asyncio.Task:
        """ Schedules the background ntp synchronizer as an independent task. """
        self.ntp_synchronizer_task = asyncio.create_task(self.ntp_synchronizer())
        return self.ntp_synchronizer_task

    async def display(self):
        """ The async display loop.

        The display synchronizes once before the first frame, so that the clock never shows the
        uncorrected local time, and then starts the background ntp synchronizer. Each frame is
        rendered from a single consistent snapshot of the synchronization state until a quit key
        is pressed.

        Raises `avtime.ntp.SyncError` when the initial synchronization fails and
        `avtime.terminal.TerminalError` when the terminal fails. The terminal is restored in
        either case.
        """

        with self.terminal as terminal:

            # Synchronize before the first frame
            terminal.draw(Frame(server=self.manager.server, synchronizing=True))
            await self.manager.refresh()

            # Schedule the background ntp synchronizer
            self.start_ntp_synchronizer()

            # Render until the user quits
            while True:
                terminal.draw(build_frame(self.manager.snapshot(), self.interval))

                if terminal.quit_requested():
                    break

                # Wait, yielding to the background ntp synchronizer in the event loop
                await asyncio.sleep(avtime.FRAME_INTERVAL)

    async def run(self):
        """ Starts the `avtime` clock service. """

        # Logging
        for line in avtime.LOGO:
            self.logger.message(line)
        self.logger.message('')
        self.logger.message('>>> Running the clock service.')
        self.logger.message('')
        self.logger.message('    Clock information')
        self.logger.message('')
        self.logger.message('        server   : %s' % self.manager.server)
        self.logger.message('        interval : %.2f [sec.]' % self.interval)
        self.logger.message('')

        # Run services
        await self.display()

        # Logging
        self.logger.info(
            'The last ntp time offset was %+d [ms], %s.' % (
                self.manager.offset,
                presentation.freshness(self.manager.seconds_since_sync())
            )
        )
