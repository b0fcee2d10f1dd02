"""Lenient parsing of delimited marketplace exports into row maps.

Exports arrive as tab-, comma- or semicolon-separated text, sometimes with a
byte-order mark, a few blank or separator-only lines above the header, ragged
rows and trailer lines. The parser finds the real header, sniffs the delimiter
from it and yields one ``dict`` per meaningful data row.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from logging import getLogger
from typing import Final

from orderbridge.domain.errors import ParseError

log = getLogger(__name__)

DEFAULT_HEADER_SCAN_LIMIT: Final[int] = 5
DEFAULT_NOISE_THRESHOLD: Final[int] = 3
FALLBACK_ENCODINGS: Final[tuple[str, ...]] = ("utf-8-sig", "cp1252")

_SEPARATOR_CHARS: Final[frozenset[str]] = frozenset(" \t,;\"'\r\n\ufeff")


@dataclass(frozen=True, slots=True)
class ParsedTable:
    """Header and surviving data rows of one parsed file."""

    delimiter: str
    header: tuple[str, ...]
    rows: list[dict[str, str]] = field(default_factory=list[dict[str, str]])
    discarded: int = 0


def decode_content(content: bytes) -> str:
    """Decode raw file bytes, stripping a UTF-8 byte-order mark."""

    if not content:
        raise ParseError("File is empty")
    for encoding in FALLBACK_ENCODINGS:
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError:
            continue
        if encoding != FALLBACK_ENCODINGS[0]:
            log.debug("Decoded file content as %s", encoding)
        return text.lstrip("\ufeff")
    raise ParseError("File content is not readable text")


def sniff_delimiter(header_line: str) -> str:
    """Pick the delimiter of a header line; a tab always wins."""

    if "\t" in header_line:
        return "\t"
    commas = header_line.count(",")
    semicolons = header_line.count(";")
    return ";" if semicolons > commas else ","


def _is_separator_only(line: str) -> bool:
    return all(char in _SEPARATOR_CHARS for char in line)


def find_header_index(lines: list[str], *, scan_limit: int = DEFAULT_HEADER_SCAN_LIMIT) -> int:
    """Return the index of the header line, skipping up to ``scan_limit`` noise lines."""

    for index, line in enumerate(lines[: scan_limit + 1]):
        if not _is_separator_only(line):
            return index
    raise ParseError("No header row found in file")


def _row_from_record(header: tuple[str, ...], record: list[str]) -> dict[str, str]:
    row: dict[str, str] = {}
    for index, name in enumerate(header):
        if not name or name in row:
            continue
        row[name] = record[index].strip() if index < len(record) else ""
    return row


def parse_table(
    content: bytes | str,
    *,
    scan_limit: int = DEFAULT_HEADER_SCAN_LIMIT,
    noise_threshold: int = DEFAULT_NOISE_THRESHOLD,
) -> ParsedTable:
    """Parse ``content`` into a :class:`ParsedTable`.

    Rows with at most ``noise_threshold`` non-empty cells are discarded. Raises
    :class:`ParseError` when the content cannot be tokenized at all.
    """

    text = decode_content(content) if isinstance(content, bytes) else content.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines:
        raise ParseError("File is empty")

    header_index = find_header_index(lines, scan_limit=scan_limit)
    delimiter = sniff_delimiter(lines[header_index])

    reader = csv.reader(io.StringIO("".join(lines[header_index:]), newline=""), delimiter=delimiter)
    try:
        records = list(reader)
    except csv.Error as exc:
        raise ParseError(f"File could not be tokenized: {exc}") from exc

    header = tuple(cell.strip().lstrip("\ufeff") for cell in records[0]) if records else ()
    if not any(header):
        raise ParseError("Header row is empty")

    rows: list[dict[str, str]] = []
    discarded = 0
    for record in records[1:]:
        row = _row_from_record(header, record)
        filled = sum(1 for value in row.values() if value)
        if filled <= noise_threshold:
            discarded += 1
            continue
        rows.append(row)

    log.debug(
        "Parsed table: delimiter=%r, columns=%s, rows=%s, discarded=%s",
        delimiter,
        len(header),
        len(rows),
        discarded,
    )
    return ParsedTable(delimiter=delimiter, header=header, rows=rows, discarded=discarded)
