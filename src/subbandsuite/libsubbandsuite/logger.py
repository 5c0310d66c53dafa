"""
Logging for subbandsuite: the standard ``logging`` module plus two extra
debug levels and the 0-6 integer verbosity used by the command-line tools.

Library modules only fetch a logger; handlers are attached by the
command-line driver through :func:`setup`.

Example
-------
>>> from subbandsuite.libsubbandsuite.logger import get_logger
>>> log = get_logger(__name__)
>>> log.info("Transition 2->1: Wbar = %e s^-1", 1.2e12)
>>> log.debug2("ki = %e 1/m", 3.0e8)     # per-sample detail
"""

import logging
import sys

ROOT_NAME = "subbandsuite"

# Finer than DEBUG (10): per-wavevector and per-sample traces
DEBUG2 = logging.DEBUG - 1
DEBUG3 = logging.DEBUG - 2

for _level, _name in ((DEBUG2, "DEBUG2"), (DEBUG3, "DEBUG3")):
    logging.addLevelName(_level, _name)

# Command-line verbosity -> logging level
VERBOSITY_LEVEL_MAP = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
    4: logging.DEBUG,
    5: DEBUG2,
    6: DEBUG3,
}

_FORMAT = "%(levelname)-7s: %(message)s"


class _SubbandLogger(logging.Logger):
    """``logging.Logger`` with ``debug2``/``debug3`` shortcuts.

    Records are attributed to the caller of the shortcut, not to this module.
    """

    def debug2(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG2):
            kwargs.setdefault("stacklevel", 2)
            self._log(DEBUG2, msg, args, **kwargs)

    def debug3(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG3):
            kwargs.setdefault("stacklevel", 2)
            self._log(DEBUG3, msg, args, **kwargs)


logging.setLoggerClass(_SubbandLogger)


def get_logger(name: str | None = None) -> _SubbandLogger:
    """Return the named logger, or the package root logger.

    Module loggers (``get_logger(__name__)``) sit below ``subbandsuite``
    and take their level and handlers from it.
    """
    return logging.getLogger(name or ROOT_NAME)


def verbosity_level(verbosity: int) -> int:
    """Translate a 0-6 verbosity into a ``logging`` level."""
    try:
        return VERBOSITY_LEVEL_MAP[verbosity]
    except KeyError:
        raise ValueError(f"Verbosity must be 0-6: {verbosity} received.") from None


def set_level(level: int | str = logging.INFO) -> None:
    """Set the level of the package root logger.

    *level* may be a ``logging`` level name or number, or a 0-6 verbosity.
    """
    if isinstance(level, int) and level in VERBOSITY_LEVEL_MAP:
        level = verbosity_level(level)
    get_logger().setLevel(level)


def setup(level: int | str = logging.INFO, stream=None) -> None:
    """Attach a stream handler to the package root logger and set its level.

    The handler (stderr unless *stream* is given) is only attached once.
    """
    root = get_logger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    set_level(level)
