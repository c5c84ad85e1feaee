"""Rotas HTTP da API — adapters de entrada por fonte.

Responsabilidades:
- Definir endpoints HTTP (webhooks, health)
- Leitura do corpo e correlation_id
- Delegação para normalizers/use_cases
- Respostas HTTP apropriadas

Estrutura por fonte:
- routes/whatsapp/, routes/email/, routes/hubspot/, routes/calendar/
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
