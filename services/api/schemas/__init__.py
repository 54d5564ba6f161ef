"""
Pydantic schemas for API responses.
"""
from .customer import CustomerAck, ErrorOut

__all__ = ["CustomerAck", "ErrorOut"]
