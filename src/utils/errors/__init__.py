"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ContactNotFoundError,
    CrmStoreError,
    InfrastructureError,
    InvalidPayloadError,
    ProcessingAbortedError,
    RedisConnectionError,
)

__all__ = [
    "ContactNotFoundError",
    "CrmStoreError",
    "InfrastructureError",
    "InvalidPayloadError",
    "ProcessingAbortedError",
    "RedisConnectionError",
]
