"""
Folder watcher: analyze log files as they are dropped into a directory.

Files already present when the watcher starts are ignored; only files that
appear afterwards are handed to the handler, once each. We poll instead of
using OS notifications so it behaves the same on every platform.
"""

import time
from pathlib import Path
from typing import Callable, List, Optional, Set

from . import config
from . import logger


class DirectoryWatcher:
    def __init__(
        self,
        directory: Optional[Path] = None,
        handler: Optional[Callable[[Path], object]] = None,
        interval: Optional[float] = None,
    ):
        self.directory = Path(directory) if directory is not None else config.WATCH_DIR
        self.handler = handler
        self.interval = interval if interval is not None else config.POLL_INTERVAL_SECONDS
        self.directory.mkdir(parents=True, exist_ok=True)
        self._seen: Set[Path] = set(self._list_files())

    def _list_files(self) -> List[Path]:
        try:
            return sorted(p for p in self.directory.iterdir() if p.is_file())
        except OSError as e:
            logger.log_warn("Could not list watched folder", path=str(self.directory), error=str(e))
            return []

    def poll(self) -> List[Path]:
        """Check once for new files and hand each to the handler."""
        new_files = [p for p in self._list_files() if p not in self._seen]
        for path in new_files:
            self._seen.add(path)
            logger.log_info("New file detected", path=str(path))
            if self.handler is None:
                continue
            try:
                self.handler(path)
            except Exception as e:
                logger.log_error("Failed to process file", path=str(path), error=str(e))
        return new_files

    def run(self, max_polls: Optional[int] = None) -> None:
        """Poll until interrupted (or for max_polls iterations)."""
        logger.log_info("Watching folder for new log files", path=str(self.directory))
        polls = 0
        try:
            while max_polls is None or polls < max_polls:
                self.poll()
                polls += 1
                if max_polls is None or polls < max_polls:
                    time.sleep(self.interval)
        except KeyboardInterrupt:
            logger.log_info("Watcher stopped by user")
