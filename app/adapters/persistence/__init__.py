"""Persistence adapters.

Document gateways hide the storage driver behind a small async interface
so services only ever deal with plain record dictionaries.
"""

from app.adapters.persistence.base import AbstractDocumentGateway, Record, WriteAck
from app.adapters.persistence.factory import create_document_gateway
from app.adapters.persistence.in_memory import InMemoryDocumentGateway

__all__ = [
    "AbstractDocumentGateway",
    "InMemoryDocumentGateway",
    "Record",
    "WriteAck",
    "create_document_gateway",
]
