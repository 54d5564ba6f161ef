# services/api/routers/customers.py
from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from adapters.base import RecordStore
from adapters.sheets import upstream_error_payload
from core.errors import EmptySheet, RecordNotFound, SheetSchemaError
from core.records import pad_alnum
from core.variants import LIST_SEPARATOR
from dependencies import get_store
from schemas.customer import CustomerAck, ErrorOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customers", tags=["customers"])

Store = Annotated[RecordStore, Depends(get_store)]
Payload = Annotated[Dict[str, Any], Body()]

_ERRORS = {404: {"model": ErrorOut}, 500: {"model": ErrorOut}}


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorOut(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _upstream_failure(action: str, error: str, e: Exception) -> JSONResponse:
    upstream = upstream_error_payload(e)
    if upstream:
        logger.error(f"Error {action}: {e} | upstream: {upstream}")
    else:
        logger.error(f"Error {action}: {e}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, error, str(e))


@router.get("", responses={500: {"model": ErrorOut}})
def list_customers(store: Store):
    """
    All rows below the header as records.

    The functions variant returns the list as one padded JSON string.
    """
    try:
        customers = store.list_records()
    except Exception as e:
        return _upstream_failure("fetching customers", "Failed to fetch customers", e)

    if customers and store.variant.obfuscate_list:
        encoded = json.dumps(customers, separators=(",", ":"), ensure_ascii=False)
        return pad_alnum(encoded, LIST_SEPARATOR)
    return customers


@router.get("/{customer_id}", responses=_ERRORS)
def get_customer(customer_id: str, store: Store):
    try:
        return store.get_record(customer_id)
    except EmptySheet:
        return _error(status.HTTP_404_NOT_FOUND, "No data in sheet or customer not found")
    except RecordNotFound:
        return _error(status.HTTP_404_NOT_FOUND, "Customer not found")
    except SheetSchemaError:
        # same wording whichever lookup column is configured
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Sheet does not have an 'id' column in the header.",
        )
    except Exception as e:
        return _upstream_failure(
            f"fetching customer {customer_id}", "Failed to fetch customer", e
        )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={201: {"model": CustomerAck}, 500: {"model": ErrorOut}},
)
def create_customer(payload: Payload, store: Store):
    try:
        updates = store.create_record(payload)
    except SheetSchemaError as e:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except Exception as e:
        return _upstream_failure("creating customer", "Failed to create customer", e)

    ack: Dict[str, Any] = {"message": "Customer created successfully"}
    if store.variant.echo_payload:
        ack["data"] = payload
        ack["updates"] = updates
    return ack


@router.put("/{customer_id}", responses={200: {"model": CustomerAck}, **_ERRORS})
def update_customer(customer_id: str, payload: Payload, store: Store):
    try:
        store.update_record(customer_id, payload)
    except EmptySheet:
        return _error(status.HTTP_404_NOT_FOUND, "Customer not found or sheet is empty.")
    except RecordNotFound:
        return _error(status.HTTP_404_NOT_FOUND, "Customer not found")
    except SheetSchemaError as e:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Sheet does not have an '{e.column}' column.")
    except Exception as e:
        return _upstream_failure(
            f"updating customer {customer_id}", "Failed to update customer", e
        )

    ack: Dict[str, Any] = {"message": f"Customer {customer_id} updated successfully"}
    if store.variant.echo_payload:
        ack["data"] = payload
    return ack


@router.delete("/{customer_id}", responses={200: {"model": CustomerAck}, **_ERRORS})
def delete_customer(customer_id: str, store: Store):
    try:
        store.delete_record(customer_id)
    except EmptySheet:
        return _error(status.HTTP_404_NOT_FOUND, "Customer not found or sheet too empty.")
    except RecordNotFound:
        return _error(status.HTTP_404_NOT_FOUND, "Customer not found by ID for deletion.")
    except SheetSchemaError as e:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Sheet must have an '{e.column}' header column.")
    except Exception as e:
        return _upstream_failure(
            f"deleting customer {customer_id}", "Failed to delete customer", e
        )

    return {"message": f"Customer {customer_id} deleted successfully"}
