"""Pydantic schemas for API requests and responses."""
from typing import Optional
from pydantic import BaseModel
from synthlead.data.models import GenerationCycleResult


class LeadSummary(BaseModel):
    """Short description of a generated lead."""
    name: str
    type: str
    comment_length: int


class GenerateLeadResponse(BaseModel):
    """Response from the generation endpoint."""
    success: bool
    lead_id: Optional[int] = None
    lead: Optional[LeadSummary] = None
    error: Optional[str] = None
    result: GenerationCycleResult

    @classmethod
    def from_result(cls, result: GenerationCycleResult) -> "GenerateLeadResponse":
        if not result.accepted:
            return cls(
                success=False,
                error=f"Failed to generate unique comment after {len(result.attempts)} attempts",
                result=result,
            )
        record = result.record
        return cls(
            success=True,
            lead_id=result.record_id,
            lead=LeadSummary(
                name=record.full_name,
                type=record.category.value,
                comment_length=len(record.text),
            ),
            result=result,
        )


class ErrorDetail(BaseModel):
    """Body of a failed generation request."""
    error: str
    kind: str
    available: Optional[int] = None
    required: Optional[int] = None
