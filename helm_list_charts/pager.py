"""
Output sink: direct terminal output or an external pager.

Long listings are piped through the pager named by $PAGER unless paging is
disabled. A pager that cannot be started falls back to plain output.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import IO, Sequence

from .config import PagerConfig
from .render import RenderedTable

logger = logging.getLogger(__name__)


class Destination:
    """Somewhere rendered text can be written."""

    def write(self, text: str) -> None:
        raise NotImplementedError


class StdoutDestination(Destination):
    """Writes to a text stream, standard output by default."""

    def __init__(self, stream: IO[str] | None = None):
        self.stream = stream

    def write(self, text: str) -> None:
        # Resolve sys.stdout late so redirected streams are honoured
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(text)
        stream.flush()


class PagerDestination(Destination):
    """
    Pipes text into an external pager and waits for it to exit.

    Attributes:
        command: Pager command line, program first
        fallback: Destination used when the pager cannot be launched
    """

    def __init__(self, command: Sequence[str], fallback: Destination | None = None):
        self.command = tuple(command)
        self.fallback = fallback if fallback is not None else StdoutDestination()

    def write(self, text: str) -> None:
        try:
            proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                text=True,
                encoding="utf-8",
            )
        except OSError as e:
            logger.debug(f"Could not start pager {self.command[0]!r}: {e}; writing to stdout")
            self.fallback.write(text)
            return

        try:
            proc.stdin.write(text)
        except BrokenPipeError:
            # Pager quit before reading everything
            pass
        finally:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
            proc.wait()
        logger.debug(f"Pager {self.command[0]!r} exited with {proc.returncode}")


def should_page(line_count: int, config: PagerConfig) -> bool:
    """
    Decide whether output of `line_count` lines goes through the pager.

    Args:
        line_count: Total lines including the header
        config: Pager settings

    Returns:
        True when paging is enabled and the output exceeds the threshold
    """
    return config.enabled and line_count > config.threshold


def emit(
    table: RenderedTable,
    config: PagerConfig,
    stdout: Destination | None = None,
    pager: Destination | None = None,
) -> Destination:
    """
    Write a rendered table to its destination.

    Args:
        table: Rendered listing
        config: Pager settings
        stdout: Direct output destination (standard output if None)
        pager: Pager destination (built from config.command if None)

    Returns:
        The destination that was written to
    """
    if stdout is None:
        stdout = StdoutDestination()

    line_count = table.line_count
    if should_page(line_count, config):
        if pager is None:
            pager = PagerDestination(config.command, fallback=stdout)
        logger.debug(f"Paging {line_count} lines through {' '.join(config.command)}")
        destination = pager
    else:
        logger.debug(f"Writing {line_count} lines to stdout")
        destination = stdout

    destination.write(table.text)
    return destination
