"""
CSV encoding for the log stores.

A value is quoted only when it contains a comma, a double quote or a line
break; internal quotes are doubled. New values have line breaks flattened to
a single space, so every record written here occupies one physical line.
Parsing still accepts quoted multi-line fields written by other tools, and
rewrites keep such parsed fields as they are.
"""

import csv
import io
import re
from typing import Any, Iterable, List

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def to_cell(value: Any) -> str:
    """Stringify a scalar for storage. None becomes empty; line breaks become spaces."""
    if value is None:
        return ""
    return _LINE_BREAKS.sub(" ", str(value))


def encode_record(cells: Iterable[str]) -> str:
    """Encode already-stored cells verbatim as one CSV record terminated by ``\\n``."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(["" if c is None else str(c) for c in cells])
    return buf.getvalue()


def encode_row(values: Iterable[Any]) -> str:
    """Encode new values as one CSV line, flattening line breaks."""
    return encode_record(to_cell(v) for v in values)


def encode_rows(rows: Iterable[Iterable[str]]) -> str:
    """Re-encode parsed records verbatim, for whole-file rewrites."""
    return "".join(encode_record(row) for row in rows)


def decode(text: str) -> List[List[str]]:
    """Parse CSV text into records, skipping blank lines.

    Raises csv.Error on malformed input.
    """
    reader = csv.reader(io.StringIO(text), strict=True)
    return [record for record in reader if record]


def parse_header_line(line: str) -> List[str]:
    """Parse a single header line; empty for blank input."""
    records = decode(line)
    return [name.strip() for name in records[0]] if records else []
