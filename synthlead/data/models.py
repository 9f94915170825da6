"""Data models for the lead corpus and generation cycles."""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Category(str, Enum):
    """Visitor type of a lead."""
    LOCAL = "Local"
    VISITOR = "Visitor"
    TOURIST = "Tourist"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Map a stored string onto the enum; anything unknown becomes OTHER."""
        if value is None or not str(value).strip():
            return cls.LOCAL
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        return cls.OTHER


class SourceKind(str, Enum):
    HUMAN = "human"
    SYNTHETIC = "synthetic"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SourceKind":
        if value is not None and str(value).strip().lower() == cls.SYNTHETIC.value:
            return cls.SYNTHETIC
        return cls.HUMAN


class HistoricalRecord(BaseModel):
    """A lead comment as stored in the corpus."""
    model_config = ConfigDict(frozen=True)

    text: str
    created_at: datetime = Field(default_factory=datetime.now)
    category: Category = Category.LOCAL
    source_kind: SourceKind = SourceKind.HUMAN
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    record_id: Optional[int] = None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value):
        if isinstance(value, Category):
            return value
        return Category.parse(value)

    @field_validator("source_kind", mode="before")
    @classmethod
    def _coerce_source(cls, value):
        if isinstance(value, SourceKind):
            return value
        return SourceKind.parse(value)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class StyleProfile(BaseModel):
    """Voice the generator should write in."""
    model_config = ConfigDict(frozen=True)

    persona: str
    tone: str
    style_guide: str
    temperature: float = Field(ge=0.0, le=1.0)


class LengthTarget(BaseModel):
    """Character range for a comment plus the provider's output budget."""
    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: int = Field(gt=0)
    generation_budget: int = Field(gt=0)

    @model_validator(mode="after")
    def _check_range(self) -> "LengthTarget":
        if self.min >= self.max:
            raise ValueError(f"LengthTarget min ({self.min}) must be below max ({self.max})")
        return self


class UniquenessCheck(BaseModel):
    """Outcome of comparing one candidate against the corpus window."""
    unique: bool
    max_similarity: float = Field(ge=0.0, le=100.0)
    closest_match: Optional[str] = None


class GenerationAttempt(BaseModel):
    """One try inside a cycle. Never persisted."""
    attempt_number: int = Field(ge=1)
    candidate_text: str
    similarity_score: float = Field(ge=0.0, le=100.0)
    accepted: bool
    closest_match: Optional[str] = None
    style: Optional[StyleProfile] = None
    length: Optional[LengthTarget] = None


class CycleOutcome(str, Enum):
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


class GenerationCycleResult(BaseModel):
    """Terminal value of a cycle."""
    outcome: CycleOutcome
    attempts: List[GenerationAttempt] = Field(default_factory=list)
    record: Optional[HistoricalRecord] = None
    record_id: Optional[int] = None
    cycle_id: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == CycleOutcome.ACCEPTED

    @property
    def final_attempt(self) -> Optional[GenerationAttempt]:
        return self.attempts[-1] if self.attempts else None

    def raise_for_outcome(self) -> "GenerationCycleResult":
        """Raise UniquenessExhausted if the cycle did not produce a record."""
        if self.outcome == CycleOutcome.EXHAUSTED:
            from synthlead.errors import UniquenessExhausted

            raise UniquenessExhausted(self)
        return self
