"""
Response schemas for the customers API.

Customer records themselves are not modelled: their fields come from the
sheet's header row at request time.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class CustomerAck(BaseModel):
    """Acknowledgement for create/update/delete."""
    message: str
    data: Optional[Dict[str, Any]] = Field(
        None, description="Echo of the request payload (server variant only)"
    )
    updates: Optional[Dict[str, Any]] = Field(
        None, description="Sheets append summary (server variant create only)"
    )


class ErrorOut(BaseModel):
    error: str
    details: Optional[str] = None
