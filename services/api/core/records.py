# services/api/core/records.py
"""
Row <-> record mapping.

The header row is the only schema: column i of every data row belongs to the
field named header[i]. Nothing here talks to the spreadsheet.
"""
from __future__ import annotations

import json
import re
from typing import Any, Iterable, Optional

from .errors import SheetSchemaError


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_custom_data(value: Any) -> Any:
    """
    Parse a custom-data cell back into an object.
    Only JSON objects/arrays are accepted; anything else is returned untouched.
    """
    if not isinstance(value, str):
        return value
    try:
        parsed = json.loads(value, parse_constant=_reject_constant)
    except (ValueError, TypeError):
        return value
    if isinstance(parsed, (dict, list)):
        return parsed
    return value


def serialize_custom_data(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return value


def find_column(header: list[str], name: str) -> int:
    """Case-insensitive header lookup. Returns -1 when absent."""
    wanted = name.lower()
    for idx, col in enumerate(header):
        if str(col).lower() == wanted:
            return idx
    return -1


def require_column(header: list[str], name: str, message: str) -> int:
    idx = find_column(header, name)
    if idx == -1:
        raise SheetSchemaError(message, column=name)
    return idx


def find_row(rows: list[list[Any]], col_idx: int, record_id: str) -> Optional[int]:
    """
    Index (into ``rows``, header included) of the first data row whose key
    cell equals ``record_id`` exactly.
    """
    for i in range(1, len(rows)):
        row = rows[i]
        if col_idx < len(row) and row[col_idx] == record_id:
            return i
    return None


def shape_record(header: list[str], row: list[Any], custom_data_column: str) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for idx, col in enumerate(header):
        value = row[idx] if idx < len(row) else None
        if col == custom_data_column:
            value = parse_custom_data(value)
        record[col] = value
    return record


def project_record(record: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    return {f: record[f] for f in fields if f in record}


def build_new_row(header: list[str], payload: dict[str, Any], custom_data_column: str) -> list[Any]:
    row = []
    for col in header:
        if col not in payload:
            row.append("")
        elif col == custom_data_column:
            row.append(serialize_custom_data(payload[col]))
        else:
            row.append(payload[col])
    return row


def build_updated_row(
    header: list[str],
    existing: list[Any],
    payload: dict[str, Any],
    custom_data_column: str,
) -> list[Any]:
    """Full replacement row: payload wins, otherwise keep the stored cell."""
    row = []
    for idx, col in enumerate(header):
        if col in payload:
            value = payload[col]
            row.append(serialize_custom_data(value) if col == custom_data_column else value)
        else:
            row.append(existing[idx] if idx < len(existing) else "")
    return row


_ALNUM = re.compile(r"([a-zA-Z0-9])")


def pad_alnum(text: str, separator: str) -> str:
    """Insert ``separator`` after every ASCII letter and digit."""
    return _ALNUM.sub(lambda m: m.group(1) + separator, text)
