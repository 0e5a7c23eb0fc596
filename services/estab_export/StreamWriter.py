"""Buffered, line-oriented writer over a binary stream."""

from typing import BinaryIO

DEFAULT_BUFFER_SIZE = 64 * 1024


class StreamWriter:
    """Appends lines to a binary stream through an in-memory buffer.

    Only complete lines are handed to the stream. Use it as a context manager:
    the buffer is flushed when the block exits, whether it completed or raised.

    Usage::

        with StreamWriter(sys.stdout.buffer) as writer:
            writer.write_line("a\\tb")
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE, encoding: str = "utf-8") -> None:
        self._stream = stream
        self._buffer_size = buffer_size
        self._encoding = encoding
        self._buffer = bytearray()
        self._lines_written = 0

    def __enter__(self) -> "StreamWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.flush()

    def get_lines_written(self) -> int:
        return self._lines_written

    def write_line(self, line: str) -> None:
        """Append one line. The newline terminator is added here."""
        self._buffer += line.encode(self._encoding)
        self._buffer += b"\n"
        self._lines_written += 1
        if len(self._buffer) >= self._buffer_size:
            self._write_through()

    def write_lines(self, lines: list[str]) -> None:
        for line in lines:
            self.write_line(line)

    def flush(self) -> None:
        """Hand everything buffered to the stream and flush the stream."""
        self._write_through()
        self._stream.flush()

    def _write_through(self) -> None:
        if self._buffer:
            self._stream.write(bytes(self._buffer))
            self._buffer.clear()
