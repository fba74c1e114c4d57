#!/usr/bin/env python

"""Log messages of vareval modules to stderr or to a file.

Only records bound with `name="vareval"` reach these sinks, so
loguru output of other packages in the same process is unaffected.

Levels
------
DEBUG: histogram binning, per-site dispatch details.
INFO: input paths, progress every N positions, files written. (DEFAULT)
WARNING: truth sites dropped before the first eval site was seen.
ERROR: logged just before a VarEvalError is raised.

Examples
--------
>>> import vareval
>>> vareval.set_log_level("DEBUG")
>>> vareval.set_log_level("INFO", log_file="results/vareval.log")
"""

from typing import Optional, Iterator, List
from contextlib import contextmanager
import sys
from pathlib import Path
from loguru import logger
import IPython

# handler ids added by set_log_level
LOGGERS = [0]


def formatter(record) -> str:
    """Format as 'date time | LEVEL | module:line | message'."""
    return (
        "{time:YYYY-MM-DD HH:mm:ss} | "
        "<level>{level:<7}</level> | "
        "<cyan>{name}:{line}</cyan> | "
        "{message}\n{exception}"
    )


def color_support() -> bool:
    """Colorize stderr only in a jupyter kernel or an interactive terminal."""
    return bool(IPython.get_ipython()) or sys.stderr.isatty()


def _vareval_filter(record) -> bool:
    return record["extra"].get("name") == "vareval"


def set_log_level(log_level: str = "DEBUG", log_file: Optional[Path] = None):
    """Replace the vareval sink with one at `log_level`.

    Messages go to `log_file` when one is given (rotated at 50 MB),
    otherwise to stderr. Calling this again removes the previous sink,
    which flushes any messages still queued for it.
    """
    for idx in LOGGERS:
        try:
            logger.remove(idx)
        except ValueError:
            pass
    LOGGERS.clear()

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = dict(sink=log_file, colorize=False, rotation="50 MB")
    else:
        sink = dict(sink=sys.stderr, colorize=color_support())
    idx = logger.add(
        level=log_level,
        format=formatter,
        filter=_vareval_filter,
        enqueue=True,
        **sink,
    )
    LOGGERS.append(idx)
    logger.enable("vareval")
    get_logger().debug(f"vareval log level: {log_level}")


def get_logger():
    """Return the loguru logger bound to the vareval sinks."""
    return logger.bind(name="vareval")


@contextmanager
def capture_logs(log_level: str = "INFO") -> Iterator[List[str]]:
    """Collect 'LEVEL:module:message' strings emitted inside the block.

    Examples
    --------
    >>> with capture_logs("WARNING") as cap:
    ...     gc.process(None, site)
    >>> assert any("dropping" in msg for msg in cap)
    """
    messages: List[str] = []

    def _sink(message):
        record = message.record
        messages.append(
            f"{record['level'].name}:{record['name']}:{record['message']}")

    idx = logger.add(_sink, level=log_level, filter=_vareval_filter, format="{message}")
    try:
        yield messages
    finally:
        logger.remove(idx)
