"""
Row tokenizer.

Splits raw export lines into fields. Quote handling is deliberately simple:
every quote character flips the quoted state, so "a,""b" style escapes are
not interpreted.
"""

import re
from typing import Iterable, Iterator, List, Sequence

_NEWLINE = re.compile(r"\r\n|\r|\n")

DEFAULT_ENCODINGS = ("utf-8-sig", "ascii", "cp1252", "latin-1")


def split_row(line: str, delimiter: str = ",", quote: str = '"') -> List[str]:
    """
    Split one line into fields.

    A delimiter inside a quoted span is kept as text. The quote characters
    themselves are dropped. An unterminated quote consumes the rest of the
    line. Always returns at least one field.
    """
    fields: List[str] = []
    current: List[str] = []
    inside_quotes = False

    for char in line:
        if char == quote:
            inside_quotes = not inside_quotes
        elif char == delimiter and not inside_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


def iter_lines(text: str) -> Iterator[str]:
    """Yield lines regardless of newline convention."""
    start = 0
    for match in _NEWLINE.finditer(text):
        yield text[start : match.start()]
        start = match.end()
    if start < len(text):
        yield text[start:]


def iter_non_blank(lines: Iterable[str]) -> Iterator[str]:
    """Drop whitespace-only lines and trailing newline characters."""
    for line in lines:
        line = line.rstrip("\r\n")
        if line.strip():
            yield line


def decode_bytes(data: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """Decode an upload, trying each encoding in order."""
    for encoding in encodings:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue

    raise ValueError("Could not decode file with any known encoding")
