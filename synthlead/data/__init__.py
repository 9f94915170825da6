"""Data models and utilities."""
from synthlead.data.models import (
    Category,
    SourceKind,
    HistoricalRecord,
    StyleProfile,
    LengthTarget,
    UniquenessCheck,
    GenerationAttempt,
    CycleOutcome,
    GenerationCycleResult,
)

__all__ = [
    "Category",
    "SourceKind",
    "HistoricalRecord",
    "StyleProfile",
    "LengthTarget",
    "UniquenessCheck",
    "GenerationAttempt",
    "CycleOutcome",
    "GenerationCycleResult",
]
