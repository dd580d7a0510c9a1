"""
Append-only CSV log with read-back, row updates and merged annotations.

The file's own header row is the source of truth for column mapping: appends
to an existing file follow that header, and reads map columns by it, even when
it differs from the field list the store was created with.

Row ids are 0-based indexes over the data rows of the file. Appends, batch
appends and row rewrites on one file are serialized through that file's lock.
Reads take no lock; appends are single write calls and rewrites replace the
file atomically.
"""

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .annotations import AnnotationStore
from .config import clamp_limit
from .csv_codec import decode, encode_row, encode_rows, parse_header_line, to_cell
from .errors import AnnotationError, LogWriteError, RowNotFoundError, RowOutOfRangeError
from .fileio import append_text, atomic_write_text, lock_for, read_text
from .schema import Annotation, LogPage
from ..util.logging import logger


class SubmissionLog:
    def __init__(self, path, fields: List[str], annotations: Optional[AnnotationStore] = None):
        if not fields:
            raise ValueError("a CSV log needs at least one field")
        self.path = Path(path)
        self.fields = list(fields)
        self.annotations = annotations

    @property
    def lock(self):
        return lock_for(self.path)

    # Writes

    def append(self, fields: Mapping[str, Any]) -> None:
        """Append one record. Missing fields are stored empty, unknown ones dropped."""
        self.append_many([fields])

    def append_many(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Append several records with one write call; returns how many were written."""
        records = list(records)
        if not records:
            return 0

        try:
            with self.lock:
                header, needs_newline = self._tail_state()
                chunks = []
                if header is None:
                    header = self.fields
                    chunks.append(encode_row(header))
                elif needs_newline:
                    chunks.append("\n")
                chunks.extend(encode_row(self._build_row(header, r)) for r in records)
                append_text(self.path, "".join(chunks))
        except OSError as e:
            logger.log_submission_operation("append", str(self.path), {"error": str(e)}, status="failed")
            raise LogWriteError(f"Failed to append to {self.path.name}: {e}") from e

        logger.log_submission_operation("append", str(self.path), {"rows": len(records)})
        return len(records)

    def update_row(self, row_id, updates: Mapping[str, Any]) -> Dict[str, str]:
        """Overwrite header fields of one row and rewrite the file atomically.

        Raises RowNotFoundError when the file is missing and RowOutOfRangeError
        when ``row_id`` is not a valid data row index. Returns the updated row.
        """
        with self.lock:
            try:
                text = read_text(self.path)
            except (OSError, UnicodeDecodeError) as e:
                raise LogWriteError(f"Failed to read {self.path.name}: {e}") from e
            if text is None:
                raise RowNotFoundError(f"{self.path.name} does not exist")

            try:
                records = decode(text)
            except csv.Error as e:
                raise LogWriteError(f"{self.path.name} is not valid CSV: {e}") from e
            if not records:
                raise RowNotFoundError(f"{self.path.name} has no header")

            raw_header, data = records[0], records[1:]
            header = [name.strip() for name in raw_header]
            index = self._parse_row_id(row_id, len(data))

            target = list(data[index]) + [""] * max(0, len(header) - len(data[index]))
            changed = []
            for key, value in (updates or {}).items():
                if key in header:
                    target[header.index(key)] = to_cell(value)
                    changed.append(key)
            data[index] = target

            try:
                atomic_write_text(self.path, encode_rows([raw_header] + data))
            except OSError as e:
                logger.log_submission_operation("update", str(self.path), {"id": index, "error": str(e)}, status="failed")
                raise LogWriteError(f"Failed to rewrite {self.path.name}: {e}") from e

        logger.log_submission_operation("update", str(self.path), {"id": index, "fields": changed})
        return self._as_map(header, target)

    def upsert_annotation(self, row_id, note: str = "", teacher: str = "") -> Annotation:
        if self.annotations is None:
            raise AnnotationError(f"{self.path.name} does not keep annotations")
        return self.annotations.upsert(row_id, note=note, teacher=teacher)

    # Reads

    def list(self, limit: int = None) -> LogPage:
        """Return the most recent ``limit`` rows, in file order, merged with annotations."""
        parsed = self._read()
        if parsed is None:
            return LogPage()

        header, data = parsed
        limit = clamp_limit(limit)
        start = max(0, len(data) - limit)
        annotations = self.annotations.load() if self.annotations is not None else {}

        rows = []
        for index in range(start, len(data)):
            row: Dict[str, Any] = self._as_map(header, data[index])
            row["id"] = index
            annotation = annotations.get(str(index))
            if annotation is not None:
                row["note"] = annotation.note
                row["teacher"] = annotation.teacher
            elif self.annotations is not None:
                row.setdefault("note", "")
                row.setdefault("teacher", "")
            rows.append(row)

        return LogPage(header=header, rows=rows, total=len(data))

    def count(self) -> int:
        parsed = self._read()
        return 0 if parsed is None else len(parsed[1])

    def exists(self) -> bool:
        return self.path.exists()

    def read_raw(self) -> str:
        """Raw CSV text; just the configured header when the file is absent."""
        text = read_text(self.path)
        return encode_row(self.fields) if text is None else text

    # Helpers

    def _read(self) -> Optional[Tuple[List[str], List[List[str]]]]:
        try:
            text = read_text(self.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return [], []
        if text is None:
            return None
        try:
            records = decode(text)
        except csv.Error as e:
            logger.log_submission_operation("read", str(self.path), {"error": str(e)}, status="degraded")
            return [], []
        if not records:
            return [], []
        return [name.strip() for name in records[0]], records[1:]

    def _tail_state(self) -> Tuple[Optional[List[str]], bool]:
        """The existing header (None when absent or empty) and whether the file lacks a final newline."""
        try:
            with open(self.path, "rb") as fh:
                fh.seek(0, 2)
                if fh.tell() == 0:
                    return None, False
                fh.seek(-1, 2)
                needs_newline = fh.read(1) not in (b"\n", b"\r")
                fh.seek(0)
                first_line = fh.readline().decode("utf-8", errors="replace")
        except FileNotFoundError:
            return None, False

        header = parse_header_line(first_line) if first_line.strip() else []
        if not header:
            return None, False
        return header, needs_newline

    @staticmethod
    def _build_row(header: List[str], fields: Mapping[str, Any]) -> List[str]:
        return [to_cell(fields.get(name)) for name in header]

    @staticmethod
    def _as_map(header: List[str], record: List[str]) -> Dict[str, str]:
        return {name: record[i] if i < len(record) else "" for i, name in enumerate(header)}

    @staticmethod
    def _parse_row_id(row_id, count: int) -> int:
        if isinstance(row_id, bool):
            raise RowOutOfRangeError(f"Invalid row id: {row_id!r}")
        if isinstance(row_id, int):
            index = row_id
        elif isinstance(row_id, str) and row_id.strip().isascii() and row_id.strip().isdigit():
            index = int(row_id.strip())
        else:
            raise RowOutOfRangeError(f"Invalid row id: {row_id!r}")

        if index < 0 or index >= count:
            raise RowOutOfRangeError(f"Row id {index} out of range (rows: {count})")
        return index
