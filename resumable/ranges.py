from __future__ import annotations

import re
from typing import NamedTuple

from resumable.exceptions import MalformedRange

BYTES_UNIT = "bytes"

_DIGITS = re.compile(r"\d+", re.ASCII)


class ByteRange(NamedTuple):
    start: int
    length: int

    @property
    def stop(self) -> int:
        """The last byte included in the range (inclusive)."""
        return self.start + self.length - 1

    def content_range(self, total_length: int) -> str:
        return f"{BYTES_UNIT} {self.start}-{self.stop}/{total_length}"


def _parse_position(value: str, *, header_value: str, total_length: int) -> int:
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        raise MalformedRange(header_value=header_value, size=total_length)
    return int(value)


def parse_range_header(
    header_value: bytes | str | None, total_length: int
) -> tuple[ByteRange, bool]:
    """
    Turn a `Range` request header into the byte window to send back.

    Only a single range in the form `bytes=<start>-[<end>]` is understood. When a client
    sends several comma separated ranges only the first one is honoured.

    Args:
        header_value: The raw `Range` header, `None` when the client did not send one.
        total_length: The size of the resource in bytes.

    Return:
        The `ByteRange` and a flag telling if the response is partial. A missing
        header returns the whole resource and `False`.

    Raises:
        MalformedRange: The header is not parseable or falls outside of the resource.
            It leads to a 416 response carrying `content-range: bytes */<total_length>`.
    """
    if header_value is not None and not isinstance(header_value, str):
        header_value = header_value.decode("latin-1")
    if header_value is None or not header_value.strip():
        return ByteRange(start=0, length=total_length), False

    unit, separator, rest = header_value.strip().partition("=")
    if not separator or unit.strip().lower() != BYTES_UNIT:
        raise MalformedRange(header_value=header_value, size=total_length)

    rangedef = rest.split(",", 1)[0]
    first, dash, last = rangedef.partition("-")
    if not dash:
        raise MalformedRange(header_value=header_value, size=total_length)

    start = _parse_position(first, header_value=header_value, total_length=total_length)
    if last.strip():
        end = _parse_position(last, header_value=header_value, total_length=total_length)
        length = end - start + 1
    else:
        end = total_length - 1
        length = total_length - start

    if start >= total_length or length <= 0 or start + length > total_length:
        raise MalformedRange(
            header_value=header_value, range_def=(start, end), size=total_length
        )
    return ByteRange(start=start, length=length), True
