"""Protocolos do store relacional de contatos, interações e reuniões.

Interfaces leves (ABCs) dependidas pelos serviços de app/services.

O store abre uma transação por evento (`transaction()`); todas as operações
de escrita acontecem no objeto de transação. Etapas best-effort rodam
dentro de `savepoint()`, que desfaz apenas a própria etapa em caso de erro.

Implementações devem converter falhas de I/O em `CrmStoreError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager
    from datetime import date

    from app.domain.models import Contact, Interaction, Meeting


class CrmTransactionProtocol(ABC):
    """Operações disponíveis dentro de uma transação do store."""

    @abstractmethod
    def savepoint(self) -> AbstractAsyncContextManager[None]:
        """Fronteira aninhada: erro dentro dela desfaz só o que ela escreveu."""

    @abstractmethod
    async def find_contact_by_mobile(self, mobile: str) -> Contact | None:
        """Primeiro contato com `mobile` igual ao telefone normalizado."""

    @abstractmethod
    async def find_contact_by_email(self, email: str) -> Contact | None:
        """Primeiro contato com email igual em email, email2 ou email3."""

    @abstractmethod
    async def insert_contact(self, contact: Contact) -> Contact:
        """Insere contato e retorna a linha com `id` atribuído."""

    @abstractmethod
    async def get_last_interaction(self, contact_id: int) -> date | None:
        """Data de última interação do contato.

        Raises:
            ContactNotFoundError: Se o contato não existir.
        """

    @abstractmethod
    async def set_last_interaction(self, contact_id: int, value: date) -> None:
        """Atualiza a data de última interação do contato."""

    @abstractmethod
    async def insert_interaction(self, interaction: Interaction) -> Interaction:
        """Insere interação (append-only) e retorna a linha gravada."""

    @abstractmethod
    async def insert_meeting(self, meeting: Meeting) -> Meeting:
        """Insere reunião e retorna a linha com `id` atribuído."""

    @abstractmethod
    async def link_meeting_contact(self, meeting_id: int, contact_id: int) -> None:
        """Cria linha em meeting_contacts."""


class CrmStoreProtocol(ABC):
    """Store de contatos/interações com fronteira transacional por evento."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[CrmTransactionProtocol]:
        """Abre transação; commit ao sair sem erro, rollback se houver exceção."""

    @abstractmethod
    async def ping(self) -> None:
        """Verifica conectividade (readiness).

        Raises:
            CrmStoreError: Se o backend não responder.
        """

    async def close(self) -> None:  # noqa: B027
        """Libera conexões. Padrão: nada a liberar."""
