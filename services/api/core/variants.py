# services/api/core/variants.py
"""
Deployment variants.

The proxy has been shipped twice with slightly different behaviour:

- ``server``    : standalone server. Lookup by ``id``, full records, plain list.
- ``functions`` : cloud-functions build. Get-by-id looks up the ``phone``
                  column and only returns a few fields, the list endpoint
                  returns a padded JSON string, and acks carry no payload echo.

Update and delete key on ``id`` in both.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

LIST_SEPARATOR = "@#~!%_=&-{}<>"


@dataclass(frozen=True)
class DeploymentVariant:
    name: str
    lookup_field: str = "id"
    mutation_key_field: str = "id"
    projection: Optional[Tuple[str, ...]] = None
    obfuscate_list: bool = False
    echo_payload: bool = True


VARIANTS: Dict[str, DeploymentVariant] = {
    "server": DeploymentVariant(name="server"),
    "functions": DeploymentVariant(
        name="functions",
        lookup_field="phone",
        projection=("firstName", "lastName", "deliveryStatus"),
        obfuscate_list=True,
        echo_payload=False,
    ),
}


def get_variant(name: str) -> DeploymentVariant:
    try:
        return VARIANTS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown deployment variant {name!r} (expected one of {sorted(VARIANTS)})"
        ) from None


@dataclass(frozen=True)
class StoreConfig:
    """Everything SheetRecordStore needs to address the sheet."""
    spreadsheet_id: str
    sheet_name: str
    custom_data_column: str = "customData"
    last_column: str = "Z"
    variant: DeploymentVariant = field(default_factory=lambda: VARIANTS["server"])
