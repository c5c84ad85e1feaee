"""Protocolos e contratos do core da aplicação."""

from .crm_store import CrmStoreProtocol, CrmTransactionProtocol
from .dedupe import AsyncDedupeProtocol

__all__ = [
    "AsyncDedupeProtocol",
    "CrmStoreProtocol",
    "CrmTransactionProtocol",
]
