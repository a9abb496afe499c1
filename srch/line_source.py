import logging
import queue
import threading
import time
from typing import Callable, IO, Iterator, List

from srch.search_result import LineRecord

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL = 0.1  # seconds

_END_OF_INPUT = object()


def _strip_terminator(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def _replace_undecodable(stream: IO[str]) -> IO[str]:
    """Decodes like FileLineSource: bad bytes become U+FFFD instead of ending the stream."""
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="replace")
    return stream


class FileLineSource:
    """A file read to end-of-input as one document."""

    def __init__(self, path: str):
        self.path = path

    def __iter__(self) -> Iterator[LineRecord]:
        with open(self.path, "r", encoding="utf-8", errors="replace") as f:
            for index, line in enumerate(f):
                yield LineRecord(index=index, text=_strip_terminator(line))

    def read(self) -> List[LineRecord]:
        """
        Reads the whole document. Any OSError (open or read) propagates, so a
        document that fails halfway never reaches rendering.
        """
        return list(self)


class _ReadFailure:
    def __init__(self, error: Exception):
        self.error = error


class StreamLineSource:
    """
    A live input read in slices.

    A reader thread pulls lines off the stream into a queue. The consumer
    hands the accumulated lines downstream as one document whenever
    `flush_interval` has passed since the previous flush, even while the
    producer is idle, and once more at end-of-input. Each slice is an
    independent document: indices restart at 0, and context never crosses a
    slice boundary.
    """

    def __init__(
        self,
        stream: IO[str],
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._stream = _replace_undecodable(stream)
        self._flush_interval = flush_interval
        self._clock = clock
        self._lines: "queue.Queue[object]" = queue.Queue()

    def _read_lines(self):
        try:
            for line in self._stream:
                self._lines.put(_strip_terminator(line))
        except (OSError, ValueError) as e:
            self._lines.put(_ReadFailure(e))
        else:
            self._lines.put(_END_OF_INPUT)

    def documents(self) -> Iterator[List[LineRecord]]:
        reader = threading.Thread(target=self._read_lines, name="srch-stdin", daemon=True)
        reader.start()

        buffer: List[str] = []
        last_flush = float("-inf")
        while True:
            timeout = None
            if buffer:
                timeout = max(0.0, last_flush + self._flush_interval - self._clock())
            try:
                item = self._lines.get(timeout=timeout)
            except queue.Empty:
                item = None

            if item is _END_OF_INPUT:
                break
            if isinstance(item, _ReadFailure):
                logger.debug("Stream read failed, dropping %d pending lines: %s", len(buffer), item.error)
                return
            if item is not None:
                buffer.append(item)

            if buffer and self._clock() - last_flush >= self._flush_interval:
                last_flush = self._clock()
                yield [LineRecord(index=i, text=text) for i, text in enumerate(buffer)]
                buffer = []

        if buffer:
            yield [LineRecord(index=i, text=text) for i, text in enumerate(buffer)]
