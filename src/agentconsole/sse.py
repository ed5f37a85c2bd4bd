"""Encoder for the ``data:`` record wire format.

The inverse of :class:`~agentconsole.streaming.StreamingParser`: turns
payload dicts into newline-terminated records. Used to build replay
files and test streams.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Iterable
from typing import Any

from agentconsole.records import DATA_PREFIX


def encode_record(payload: Any) -> str:
    """Encode one payload as a newline-terminated ``data:`` record."""
    return f"{DATA_PREFIX}{json.dumps(payload)}\n"


def encode_records(payloads: Iterable[Any]) -> bytes:
    return "".join(encode_record(p) for p in payloads).encode("utf-8")


async def sse_records(
    payloads: Iterable[Any],
    chunk_size: int | None = None,
) -> AsyncIterator[bytes]:
    """Yield the encoded stream, optionally re-chunked at fixed byte sizes.

    Fixed-size chunks ignore record and UTF-8 boundaries, as network
    reads do.
    """
    data = encode_records(payloads)
    if chunk_size is None:
        for line in data.splitlines(keepends=True):
            yield line
        return
    for start in range(0, len(data), chunk_size):
        yield data[start:start + chunk_size]
