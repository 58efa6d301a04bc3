"""Defines a ColourFormatter for logging to stdout/stderr."""
import logging
import sys
from typing import Dict, Final, Optional, TextIO

RESET: Final = "\x1b[0m"

LEVEL_COLOURS: Final[Dict[int, str]] = {
    logging.DEBUG: "\x1b[34;20m",     # blue
    logging.INFO: "\x1b[36;20m",      # cyan
    logging.WARNING: "\x1b[33;20m",   # yellow
    logging.ERROR: "\x1b[31;20m",     # red
    logging.CRITICAL: "\x1b[31;1m",   # bold red
}


class ColourFormatter(logging.Formatter):
    """Wraps each record in the ANSI colour for its level.

    Records at a level between two of ``LEVEL_COLOURS`` take the colour of
    the next level up.  ``colour=False`` formats plainly, for when the
    stream is not a terminal.
    """

    format_template = "%(levelname)s - %(name)s - %(message)s"

    def __init__(self, fmt: Optional[str] = None, colour: bool = True):
        super().__init__(fmt or self.format_template)
        self.colour = colour

    def _colour_for(self, level: int) -> str:
        for lvl in sorted(LEVEL_COLOURS):
            if level <= lvl:
                return LEVEL_COLOURS[lvl]
        return LEVEL_COLOURS[logging.CRITICAL]

    def format(self, record):
        result = super().format(record)
        if not self.colour:
            return result
        return self._colour_for(record.levelno) + result + RESET


def make_color_stream_handler(stream: TextIO = sys.stderr, level=logging.DEBUG):
    """Makes a stream handler with color formatter, coloured only on a tty."""
    h = logging.StreamHandler(stream)
    h.setLevel(level)
    isatty = getattr(stream, "isatty", None)
    h.setFormatter(ColourFormatter(colour=bool(isatty and isatty())))
    return h


def add_colour_logging_to(
        logger: logging.Logger | str | None,
        stream: TextIO = sys.stderr,
        level=logging.DEBUG,
) -> logging.Logger:
    """Creates stream handler with colour formatter and attaches it to the given logger."""
    if not isinstance(logger, logging.Logger):
        logger = logging.getLogger(logger)
    h = make_color_stream_handler(stream=stream, level=level)
    logger.addHandler(h)
    logger.setLevel(level)
    return logger
