"""Newline framing over a fragmented byte stream."""

from __future__ import annotations

import codecs
import logging

logger = logging.getLogger(__name__)


class LineFramer:
    """Splits raw byte chunks into complete newline-terminated records.

    UTF-8 sequences split across chunks are held by an incremental
    decoder; invalid bytes decode to U+FFFD instead of raising. The
    text after the last newline is kept as a pending partial line and
    prefixed to the next chunk.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: bytes) -> list[str]:
        """Return the complete records made available by ``chunk``."""
        self._pending += self._decoder.decode(chunk)
        lines = self._pending.split("\n")
        self._pending = lines.pop()
        return lines

    def close(self) -> None:
        """End of stream. An unterminated trailing record is dropped."""
        self._pending += self._decoder.decode(b"", final=True)
        if self._pending:
            logger.debug(
                f"Discarding unterminated record at end of stream: {self._pending!r}"
            )
        self._pending = ""
