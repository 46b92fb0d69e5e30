"""Rich console that mirrors its output into the debug log.

The CLI prints through this console; with --debug every printed line also
lands in the log file as plain text, so a log alone tells what the user saw.
"""

import logging
from typing import Optional

from rich.console import Console as RichConsole


class DebugCapturingConsole(RichConsole):
    """Rich Console that records each print and forwards it to a logger"""

    def __init__(self, debug_logger: logging.Logger, *args, **kwargs):
        kwargs["record"] = True
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        # Drain the record buffer even when the logger is filtered out
        plain_text = self.export_text(clear=True).rstrip()
        if plain_text and self.debug_logger.isEnabledFor(logging.DEBUG):
            self.debug_logger.debug(f"{self._log_prefix}{plain_text}")


def create_console(debug_enabled: bool = False, debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create appropriate console instance based on debug mode.

    Args:
        debug_enabled: Whether debug mode is enabled
        debug_logger: Logger receiving captured output, defaults to the "console" logger

    Returns:
        DebugCapturingConsole if debug enabled, regular Console otherwise
    """
    if debug_enabled:
        return DebugCapturingConsole(debug_logger or logging.getLogger("console"))
    return RichConsole()
