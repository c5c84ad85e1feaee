"""Connectors — adapters de borda para APIs e webhooks externos.

Estrutura:
- http_base.py: cliente HTTP com retry/backoff
- webhook/: parse do corpo dos webhooks inbound
- hubspot/: API de assinaturas de webhook do HubSpot
"""

__all__: list[str] = []
