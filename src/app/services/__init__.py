"""Serviços de aplicação.

Etapas reutilizáveis do pipeline de registro (contato, interação,
last_interaction, reunião) e o ciclo de dedupe de entregas.
IO concreto fica em app/infra/.
"""

from app.services.contact_resolver import find_or_create_contact
from app.services.delivery_dedupe import DeliveryDeduplicator, compute_delivery_key
from app.services.interaction_writer import build_interaction, write_interaction
from app.services.last_interaction import update_if_newer
from app.services.meeting_writer import link_meeting_contacts, write_meeting

__all__ = [
    "DeliveryDeduplicator",
    "build_interaction",
    "compute_delivery_key",
    "find_or_create_contact",
    "link_meeting_contacts",
    "update_if_newer",
    "write_interaction",
    "write_meeting",
]
