from __future__ import annotations

"""
Newline-Delimited JSON Decoder.

Turns an iterable of raw byte chunks into parsed records. Chunk boundaries
may fall anywhere, including inside a line or inside a multi-byte UTF-8
sequence.
"""

import codecs
import json
from typing import Any, Iterable, Iterator

from symboltree.domain.errors import MalformedRecordError


def iter_ndjson(chunks: Iterable[bytes], encoding: str = "utf-8") -> Iterator[Any]:
    """
    Yield one parsed JSON value per line of the byte stream, in order.

    Blank lines are skipped. A last line without a trailing newline is still
    parsed once the stream ends.

    Args:
        chunks: Byte chunks, such as a response body read incrementally.
        encoding: Text encoding of the stream.

    Yields:
        Any: Decoded record.

    Raises:
        MalformedRecordError: If a line is not valid JSON or not valid text.
    """
    decoder = codecs.getincrementaldecoder(encoding)()
    buffer = ""
    line_number = 0

    try:
        for chunk in chunks:
            text = decoder.decode(chunk)
            if "\n" not in text:
                buffer += text
                continue

            lines = (buffer + text).split("\n")
            buffer = lines.pop()
            for line in lines:
                line_number += 1
                if line.strip():
                    yield _parse_line(line, line_number)

        buffer += decoder.decode(b"", final=True)
    except UnicodeDecodeError as e:
        raise MalformedRecordError(f"Invalid {encoding} data near line {line_number + 1}: {e}",
                                   line_number + 1) from e

    if buffer.strip():
        yield _parse_line(buffer, line_number + 1)


def _parse_line(line: str, line_number: int) -> Any:
    try:
        return json.loads(line)
    except ValueError as e:
        raise MalformedRecordError(f"Malformed record on line {line_number}: {e}", line_number) from e
