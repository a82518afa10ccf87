"""Concurrent readers for a child process's output streams"""

import logging
import threading
from typing import IO, List, Optional, Tuple

logger = logging.getLogger(__name__)


class OutputDrain:
    """
    Reads a binary stream to end-of-stream on a background thread

    Lines are decoded and stripped of their line terminator. They are only
    available once the stream has closed and the thread has finished.
    """

    def __init__(self, stream: IO[bytes], name: str, encoding: str = "utf-8"):
        self.name = name
        self.encoding = encoding
        self.error: Optional[BaseException] = None
        self._stream = stream
        self._lines: List[str] = []
        self._thread = threading.Thread(
            target=self._run,
            name=f"drain-{name}",
            daemon=True
        )

    def start(self) -> "OutputDrain":
        self._thread.start()
        return self

    def _run(self):
        try:
            for raw in iter(self._stream.readline, b""):
                line = raw.decode(self.encoding, errors="replace")
                self._lines.append(line.rstrip("\r\n"))
        except Exception as e:
            # Surfaced by the executor; lines collected so far are incomplete
            self.error = e
            logger.debug(f"Drain {self.name} stopped reading: {e}")
        finally:
            try:
                self._stream.close()
            except OSError as e:
                logger.debug(f"Drain {self.name} failed to close stream: {e}")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the stream to close; returns True once the drain finished"""
        self._thread.join(timeout)
        return self.finished

    @property
    def finished(self) -> bool:
        return not self._thread.is_alive()

    @property
    def complete(self) -> bool:
        """Finished reading and reached end-of-stream without an error"""
        return self.finished and self.error is None

    @property
    def lines(self) -> Tuple[str, ...]:
        if not self.finished:
            raise RuntimeError(f"Drain {self.name} is still reading")
        if self.error is not None:
            raise RuntimeError(f"Drain {self.name} stopped early: {self.error}")
        return tuple(self._lines)
