"""App — orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: registro de interações e de reuniões
- services/: etapas do pipeline (contato, interação, last_interaction, reunião, dedupe)
- domain/: linhas do CRM, eventos normalizados e formatação
- infra/: stores concretos (memory, Supabase, SQL, Redis)
- protocols/: contratos dos stores
- observability/: correlation_id por request

Padrão: app executa; api adapta; utils apoia.
"""
