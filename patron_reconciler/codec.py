"""
CSV codec.

Responsibilities:
- encoding detection + decode to text
- newline normalization
- header-keyed row parsing with row width enforcement
- serialization of output rows
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from charset_normalizer import from_bytes

from .errors import InputMalformedError
from .rules import CSV_DELIMITER, CSV_LINE_TERMINATOR

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


def decode_csv_bytes(raw: bytes, name: str = "upload") -> str:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - UTF-8 is tried first; a leading BOM is dropped.
    - Otherwise the encoding is detected best-effort via charset-normalizer.
    - Bytes that neither decode as UTF-8 nor match any encoding are rejected.
    """
    if not raw:
        return ""

    try:
        text = raw.decode("utf-8-sig" if raw.startswith(_UTF8_BOM) else "utf-8")
    except UnicodeDecodeError:
        match = from_bytes(raw).best()
        if match is None:
            raise InputMalformedError(f"{name}: could not detect a text encoding")
        logger.info("%s: decoding as %s", name, match.encoding)
        text = str(match)

    # CRLF/CR -> LF
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_table(
    raw: bytes,
    name: str,
    required_columns: Sequence[str] = (),
) -> List[Dict[str, str]]:
    """
    Parse a header + rows CSV buffer into row mappings keyed by header.

    Short rows are padded with empty strings; cells past the header width
    are dropped.
    """
    text = decode_csv_bytes(raw, name)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=CSV_DELIMITER)

    try:
        rows = [row for row in reader if any(cell.strip() for cell in row)]
    except csv.Error as exc:
        raise InputMalformedError(f"{name}: {exc}") from exc

    if not rows:
        logger.info("%s: empty table", name)
        return []

    header = [cell.strip() for cell in rows[0]]
    missing = [column for column in required_columns if column not in header]
    if missing:
        raise InputMalformedError(f"{name}: missing required columns {missing}")

    width_expected = len(header)
    short_rows = 0
    long_rows = 0
    records: List[Dict[str, str]] = []

    for row in rows[1:]:
        if len(row) < width_expected:
            short_rows += 1
            row = row + [""] * (width_expected - len(row))
        elif len(row) > width_expected:
            long_rows += 1
            row = row[:width_expected]
        records.append(dict(zip(header, row)))

    if short_rows:
        logger.warning("%s: padded %d short rows to %d columns", name, short_rows, width_expected)
    if long_rows:
        logger.warning("%s: truncated %d long rows to %d columns", name, long_rows, width_expected)

    logger.info("%s: parsed %d rows", name, len(records))
    return records


def serialize_table(rows: Iterable[Mapping[str, Any]]) -> str:
    """Write rows as CSV; the first row's keys are the header. No rows, no output."""
    rows = list(rows)
    if not rows:
        return ""

    fieldnames = list(rows[0].keys())
    outp = io.StringIO(newline="")
    writer = csv.DictWriter(
        outp,
        fieldnames=fieldnames,
        delimiter=CSV_DELIMITER,
        lineterminator=CSV_LINE_TERMINATOR,
    )
    writer.writeheader()
    writer.writerows(rows)
    return outp.getvalue()
