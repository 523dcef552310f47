"""Logging setup and an in-memory sink for patch diagnostics."""

from __future__ import annotations

import logging
import sys

from storymod_manager.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or settings.log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


class CollectingHandler(logging.Handler):
    """Keeps ``(levelname, message)`` pairs so a UI can show what the pipeline reported.

    Attach it to the ``storymod_manager`` logger to capture every conflict,
    transform failure and state transition of a patch run.
    """

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.entries: list[tuple[str, str]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.entries.append((record.levelname, record.getMessage()))
        except Exception:
            self.handleError(record)

    def messages(self, levelname: str | None = None) -> list[str]:
        return [msg for lvl, msg in self.entries if levelname is None or lvl == levelname]

    def clear(self) -> None:
        self.entries.clear()
