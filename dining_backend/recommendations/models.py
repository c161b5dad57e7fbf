from __future__ import annotations

from pydantic import BaseModel, Field


class Recommendation(BaseModel):
    venue_id: int
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str


class RecommendationResponse(BaseModel):
    success: bool = True
    recommendations: list[Recommendation]
