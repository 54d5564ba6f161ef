"""
Interfaces for the customer record store.
Defines what the routers need from a store and what a store needs from
the spreadsheet client underneath it.
"""

from typing import Protocol, List, Dict, Any, Optional

from core.variants import DeploymentVariant


class SpreadsheetClient(Protocol):
    """
    The subset of the Sheets v4 API the store uses.

    ``gspread.Spreadsheet`` satisfies this directly; tests provide an
    in-memory implementation.
    """

    def values_get(self, range: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """spreadsheets.values.get -> {"range": ..., "values": [[...], ...]}"""
        ...

    def values_append(
        self, range: str, params: Dict[str, Any], body: Dict[str, Any]
    ) -> Dict[str, Any]:
        """spreadsheets.values.append -> {"updates": {...}}"""
        ...

    def values_update(
        self,
        range: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        ...

    def fetch_sheet_metadata(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """spreadsheets.get -> {"sheets": [{"properties": {"sheetId", "title"}}]}"""
        ...

    def batch_update(self, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


class RecordStore(Protocol):
    """
    Protocol the customers router depends on.

    Records are plain dicts keyed by the sheet's header row.
    """

    def list_records(self) -> List[Dict[str, Any]]:
        """Every data row as a record. Empty sheet -> []."""
        ...

    def get_record(self, record_id: str) -> Dict[str, Any]:
        """
        Record whose lookup column equals ``record_id``.

        Raises:
            EmptySheet / RecordNotFound, SheetSchemaError
        """
        ...

    def create_record(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Append one row. Returns the upstream update summary."""
        ...

    def update_record(self, record_id: str, payload: Dict[str, Any]) -> None:
        """Rewrite the whole row; fields missing from ``payload`` keep their value."""
        ...

    def delete_record(self, record_id: str) -> None:
        """Remove the row and shift the rows below it up."""
        ...

    def read_header(self) -> List[str]:
        ...

    @property
    def variant(self) -> DeploymentVariant:
        """Which deployment's response shapes the router should produce."""
        ...
