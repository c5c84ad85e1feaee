"""API — camada de borda.

Responsabilidades:
- Receber requests dos webhooks (WhatsApp, email, HubSpot, calendário)
- Parsear e validar payloads
- Normalizar dados para eventos internos
- Chamar APIs externas (registro de webhook no HubSpot)

Subpastas:
- connectors/: parse de webhook e clientes HTTP
- normalizers/: conversão de payloads externos → eventos internos
- routes/: endpoints HTTP por fonte + health

NÃO PODE conter: regras de persistência ou orquestração de use cases.
"""
