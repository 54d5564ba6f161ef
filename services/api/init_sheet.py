"""
Customer sheet setup.
Creates the target tab if needed and makes sure the header row carries the
default customer columns. Extra columns already in the sheet are kept.

Run:
python init_sheet.py
"""

import gspread

from core.credentials import authorize, select_credential_provider
from settings import get_settings

DEFAULT_HEADERS = [
    "id",               # Record key for update/delete
    "firstName",
    "lastName",
    "phone",            # Lookup key for the functions variant
    "deliveryStatus",
    "customData",       # JSON object
]


def ensure_customer_sheet(spreadsheet, sheet_name: str, headers=None, rows: int = 1000):
    """
    Returns (worksheet, action) where action is one of
    "created", "headers_written", "headers_extended", "unchanged".
    """
    headers = list(headers or DEFAULT_HEADERS)
    created = False
    try:
        worksheet = spreadsheet.worksheet(sheet_name)
    except gspread.WorksheetNotFound:
        worksheet = spreadsheet.add_worksheet(
            title=sheet_name,
            rows=rows,
            cols=len(headers) + 2,
        )
        created = True

    existing = worksheet.row_values(1)
    if not existing:
        worksheet.update(values=[headers], range_name="A1")
        return worksheet, "created" if created else "headers_written"

    missing = [h for h in headers if h.lower() not in {e.lower() for e in existing}]
    if missing:
        worksheet.update(values=[existing + missing], range_name="1:1")
        return worksheet, "headers_extended"
    return worksheet, "unchanged"


def main() -> int:
    settings = get_settings()
    if not settings.spreadsheet_id:
        print("✗ SPREADSHEET_ID is not set")
        return 1

    print(f"📄 Spreadsheet ID: {settings.spreadsheet_id}")
    try:
        gc = authorize(select_credential_provider(settings))
        spreadsheet = gc.open_by_key(settings.spreadsheet_id)
        print(f"✓ Connected to spreadsheet: '{spreadsheet.title}'")
    except Exception as e:
        print(f"✗ Failed to connect: {e}")
        return 1

    worksheet, action = ensure_customer_sheet(spreadsheet, settings.sheet_name)
    header = worksheet.row_values(1)
    print(f"✓ Tab '{settings.sheet_name}': {action.replace('_', ' ')}")
    print(f"   └─ {len(header)} columns: {', '.join(header)}")
    if settings.custom_data_column not in header:
        print(f"⚠️  Custom data column '{settings.custom_data_column}' is not in the header")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
