"""Recognition and decoding of ``data:`` records."""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "


def decode_record(line: str) -> Any | None:
    """Decode one record into its JSON payload.

    Returns ``None`` for anything that is not a ``data:`` line carrying a
    JSON object or array. Malformed JSON is skipped, never raised.
    """
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None
    body = line[len(DATA_PREFIX):].lstrip()
    # Producers also echo repr()-style strings on data lines; only
    # object and array literals are attempted.
    if not body.startswith(("{", "[")):
        logger.debug(f"Skipping non-JSON record: {line}")
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        logger.debug(f"Skipping malformed record ({e}): {line}")
        return None
