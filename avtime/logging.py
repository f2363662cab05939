""" Logging """

import logging

# ANSI escape sequences for colors
COLORS = {
    'cyan': '\033[36m',
}

# Default color to reset formatting
RESET = '\033[0m'


class logger():
    """ A `class` that represents the console logging handler of the clock. """

    def __init__(
        self,
        name: str = __name__,
        level: int = logging.INFO,
        text_color: str = RESET
    ):
        """ Creates an instance of the console logger.

        Parameters
        ----------
        name: `str`
            The name of the logger.
        level: `int`
            The minimum severity of the emitted log messages. Records below the level,
                e.g. the `DEBUG` records of the background synchronizer, are filtered out
                so that they never interfere with the terminal display.
        text_color: `str`
            The text-color of the console log messages.
        """
        self.logger = logging.getLogger(name=name)
        self.logger.setLevel(level=level)

        # Create and format a console handler
        if not self.logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(level=level)
            console.setFormatter(
                fmt=logging.Formatter(
                    f'{text_color}[{name}] %(message)s{RESET}'
                )
            )
            self.logger.addHandler(hdlr=console)

    def message(self, message: str):
        """ Logs message with an un-set severity.

        Parameters
        ----------
        message: `str`
            The log-message content.
        """
        self.logger.info(f"{message}")

    def debug(self, message: str):
        """ Logs message with severity `DEBUG`. """
        self.logger.debug(
            f"    DEBUG: {message}"
        )

    def info(self, message: str):
        """ Logs message with severity `INFO`. """
        self.logger.info(
            f"    INFO: {message}"
        )

    def error(self, message: str):
        """ Logs message with severity `ERROR`. """
        self.logger.error(
            f" ** ERROR: {message}"
        )


def get_clock_logger() -> logger:
    """ Get the `avtime` clock console logger. """
    return logger(name='avtime', text_color=COLORS['cyan'])
