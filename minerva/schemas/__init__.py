"""Pydantic schemas package."""

from .records import IndexResponse, ReadResponse, RecordPayload

__all__ = ["IndexResponse", "ReadResponse", "RecordPayload"]
