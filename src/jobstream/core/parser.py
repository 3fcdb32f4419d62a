"""Consumer-side parsing of a jobstream SSE byte stream."""

import codecs
import json
from typing import Iterable, Iterator

from .constants import DONE_KEY
from .errors import StreamParseError


def is_terminal(record: dict) -> bool:
    """True for the closing record of a stream."""
    return record.get(DONE_KEY) is True


def iter_records(chunks: Iterable[str | bytes]) -> Iterator[dict]:
    """Yield decoded records from a stream of arbitrarily split chunks.

    Comment lines (keep-alive pings) and blank lines are skipped. Iteration
    stops after the terminal record even if the transport has more bytes.
    """
    buffer = ""
    decoder = codecs.getincrementaldecoder("utf-8")()
    for chunk in chunks:
        if isinstance(chunk, bytes):
            chunk = decoder.decode(chunk)
        buffer += chunk
        # \r\n from intermediaries is tolerated
        buffer = buffer.replace("\r\n", "\n")
        *lines, buffer = buffer.split("\n")
        for line in lines:
            record = _parse_line(line)
            if record is None:
                continue
            yield record
            if is_terminal(record):
                return

    if buffer:
        record = _parse_line(buffer)
        if record is not None:
            yield record


def _parse_line(line: str) -> dict | None:
    if not line.startswith("data:"):
        return None
    body = line[len("data:"):].lstrip(" ")
    try:
        record = json.loads(body)
    except json.JSONDecodeError as e:
        raise StreamParseError(f"Malformed data frame: {body[:200]!r}") from e
    if not isinstance(record, dict):
        raise StreamParseError(f"Data frame is not a JSON object: {body[:200]!r}")
    return record
