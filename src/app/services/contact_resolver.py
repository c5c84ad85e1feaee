"""Resolução de contato: busca por telefone/email e cria quando ausente.

Falha de lookup ou criação não aborta o webhook: o chamador recebe um
StepResult com erro e grava a interação sem contact_id.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.formatting import format_phone_number, normalize_email, split_display_name
from app.domain.models import Contact
from app.domain.results import StepErrorKind, StepResult
from config.logging import mask_identifier
from utils.errors import CrmStoreError

if TYPE_CHECKING:
    from app.domain.events import IdentifierKind
    from app.protocols.crm_store import CrmTransactionProtocol

logger = logging.getLogger(__name__)


def normalize_identifier(identifier: str | None, kind: IdentifierKind) -> str | None:
    """Telefone vira `+<dígitos>`; email só perde espaços nas pontas."""
    if kind == "phone":
        return format_phone_number(identifier)
    return normalize_email(identifier)


def build_new_contact(identifier: str, kind: IdentifierKind, display_name: str | None) -> Contact:
    first_name, last_name = split_display_name(display_name)
    return Contact(
        mobile=identifier if kind == "phone" else None,
        email=identifier if kind == "email" else None,
        first_name=first_name,
        last_name=last_name,
        contact_category=None,
    )


async def find_or_create_contact(
    tx: CrmTransactionProtocol,
    identifier: str | None,
    kind: IdentifierKind,
    display_name: str | None = None,
) -> StepResult[Contact]:
    """Busca o contato pelo identificador normalizado ou cria um novo.

    Idempotente em efeito: a segunda chamada com o mesmo identificador
    encontra o contato criado na primeira. Não há trava de unicidade;
    entregas concorrentes do mesmo identificador novo podem duplicar.

    Args:
        tx: Transação aberta no store
        identifier: Telefone ou email como veio da fonte
        kind: "phone" ou "email"
        display_name: Nome de exibição usado só na criação

    Returns:
        StepResult com o Contact, ou erro INVALID_INPUT/STORE_FAILURE.
    """
    normalized = normalize_identifier(identifier, kind)
    if not normalized:
        return StepResult.failure(StepErrorKind.INVALID_INPUT, f"{kind} ausente ou inválido")

    try:
        async with tx.savepoint():
            if kind == "phone":
                existing = await tx.find_contact_by_mobile(normalized)
            else:
                existing = await tx.find_contact_by_email(normalized)

            if existing is not None:
                logger.debug(
                    "contact_found",
                    extra={"contact_id": existing.id, "identifier": mask_identifier(normalized)},
                )
                return StepResult.success(existing)

            created = await tx.insert_contact(build_new_contact(normalized, kind, display_name))
    except CrmStoreError as exc:
        return StepResult.failure(StepErrorKind.STORE_FAILURE, str(exc))

    logger.info(
        "contact_created",
        extra={
            "contact_id": created.id,
            "identifier_kind": kind,
            "identifier": mask_identifier(normalized),
        },
    )
    return StepResult.success(created)
