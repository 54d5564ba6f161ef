# services/api/adapters/sheets/__init__.py
from __future__ import annotations

import logging
from typing import Any, Optional

import gspread
from gspread.utils import absolute_range_name, rowcol_to_a1

from ..base import SpreadsheetClient
from core.credentials import CredentialProvider, authorize
from core.errors import ConfigurationError, EmptySheet, RecordNotFound, SheetNotFound, SheetSchemaError
from core.records import (
    build_new_row,
    build_updated_row,
    find_row,
    project_record,
    require_column,
    shape_record,
)
from core.variants import DeploymentVariant, StoreConfig

logger = logging.getLogger(__name__)

USER_ENTERED = "USER_ENTERED"


class SheetRecordStore:
    """
    Customer records on one Google Sheets tab.

    - Row 1 is the header and the only schema
    - Every call re-reads the sheet (no caching, no retries)
    - Row positions are never remembered between calls
    """

    def __init__(self, spreadsheet: SpreadsheetClient, config: StoreConfig) -> None:
        if not config.sheet_name:
            raise ValueError("SheetRecordStore requires a sheet name")
        self.ss = spreadsheet
        self.config = config

    @classmethod
    def connect(cls, provider: CredentialProvider, config: StoreConfig) -> "SheetRecordStore":
        if not config.spreadsheet_id:
            raise ConfigurationError("SPREADSHEET_ID is not set")
        gc = authorize(provider)
        return cls(gc.open_by_key(config.spreadsheet_id), config)

    @property
    def variant(self) -> DeploymentVariant:
        return self.config.variant

    # ========== Range helpers ==========

    def _range(self, a1: str) -> str:
        return absolute_range_name(self.config.sheet_name, a1)

    def _read_all(self) -> list[list[Any]]:
        resp = self.ss.values_get(self._range(f"A:{self.config.last_column}"))
        return resp.get("values") or []

    def _locate(self, rows: list[list[Any]], key_field: str, record_id: str) -> int:
        """Row index (0 = header) of ``record_id``; raises when absent."""
        if len(rows) <= 1:
            raise EmptySheet(record_id)
        col_idx = require_column(
            rows[0], key_field, f"Sheet does not have an '{key_field}' column."
        )
        row_idx = find_row(rows, col_idx, record_id)
        if row_idx is None:
            raise RecordNotFound(record_id)
        return row_idx

    def _sheet_gid(self) -> int:
        meta = self.ss.fetch_sheet_metadata()
        for sheet in meta.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == self.config.sheet_name:
                return props["sheetId"]
        raise SheetNotFound(f'Sheet with name "{self.config.sheet_name}" not found.')

    # ========== RecordStore API ==========

    def read_header(self) -> list[str]:
        resp = self.ss.values_get(self._range("1:1"))
        values = resp.get("values") or []
        return values[0] if values else []

    def list_records(self) -> list[dict[str, Any]]:
        rows = self._read_all()
        if not rows:
            return []
        header = rows[0]
        return [shape_record(header, r, self.config.custom_data_column) for r in rows[1:]]

    def get_record(self, record_id: str) -> dict[str, Any]:
        variant = self.config.variant
        rows = self._read_all()
        row_idx = self._locate(rows, variant.lookup_field, record_id)
        record = shape_record(rows[0], rows[row_idx], self.config.custom_data_column)
        if variant.projection:
            return project_record(record, variant.projection)
        return record

    def create_record(self, payload: dict[str, Any]) -> Optional[dict[str, Any]]:
        header = self.read_header()
        if not header:
            raise SheetSchemaError("Could not retrieve headers from sheet.")

        row = build_new_row(header, payload, self.config.custom_data_column)
        result = self.ss.values_append(
            self._range("A:A"),
            params={"valueInputOption": USER_ENTERED, "insertDataOption": "INSERT_ROWS"},
            body={"values": [row]},
        )
        updates = (result or {}).get("updates")
        logger.info(f"Appended row to '{self.config.sheet_name}': {(updates or {}).get('updatedRange')}")
        return updates

    def update_record(self, record_id: str, payload: dict[str, Any]) -> None:
        rows = self._read_all()
        row_idx = self._locate(rows, self.config.variant.mutation_key_field, record_id)
        header = rows[0]

        new_row = build_updated_row(header, rows[row_idx], payload, self.config.custom_data_column)
        sheet_row = row_idx + 1
        a1 = f"A{sheet_row}:{rowcol_to_a1(sheet_row, len(header))}"
        self.ss.values_update(
            self._range(a1),
            params={"valueInputOption": USER_ENTERED},
            body={"values": [new_row]},
        )
        logger.info(f"Rewrote row {sheet_row} of '{self.config.sheet_name}' for {record_id!r}")

    def delete_record(self, record_id: str) -> None:
        rows = self._read_all()
        row_idx = self._locate(rows, self.config.variant.mutation_key_field, record_id)
        gid = self._sheet_gid()

        self.ss.batch_update({
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": gid,
                            "dimension": "ROWS",
                            "startIndex": row_idx,
                            "endIndex": row_idx + 1,
                        }
                    }
                }
            ]
        })
        logger.info(f"Deleted row {row_idx + 1} of '{self.config.sheet_name}' for {record_id!r}")


def upstream_error_payload(exc: Exception) -> Any:
    """The ``error`` object Google returned with an APIError, if any."""
    if not isinstance(exc, gspread.exceptions.APIError):
        return None
    response = getattr(exc, "response", None)
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("error") if isinstance(body, dict) else body
