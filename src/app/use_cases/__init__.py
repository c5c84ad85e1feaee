"""Use cases — orquestram serviços dentro da fronteira transacional do store."""

from app.use_cases.record_interactions import (
    RecordInteractionsResult,
    RecordInteractionsUseCase,
)
from app.use_cases.record_meeting import RecordMeetingResult, RecordMeetingUseCase

__all__ = [
    "RecordInteractionsResult",
    "RecordInteractionsUseCase",
    "RecordMeetingResult",
    "RecordMeetingUseCase",
]
