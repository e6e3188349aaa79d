"""Agate AI — Suggestion Pipeline Models."""

import uuid
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ─────────────────────────────────────────────
# DATABASE MODELS: audit trail and suggestion snapshots
# ─────────────────────────────────────────────


class AiSuggestion(SQLModel, table=True):
    """Snapshot of a successful suggestion: prompt context in, structured result out."""

    __tablename__ = "ai_suggestions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    campaign_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="campaigns.id", index=True
    )
    author_user_id: Optional[uuid.UUID] = None
    kind: str = Field(description="e.g. campaign_suggestion_performance")
    prompt_snapshot: dict = Field(sa_column=Column(JSON, nullable=False))
    result: dict = Field(sa_column=Column(JSON, nullable=False))
    accepted: Optional[bool] = None  # reserved for human feedback
    created_at: datetime = Field(default_factory=_utcnow)


class AiAuditLog(SQLModel, table=True):
    """One row per pipeline request, whatever its outcome."""

    __tablename__ = "ai_audit_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[uuid.UUID] = None
    route: str
    # No FK: requests for unknown campaigns are audited too
    campaign_id: Optional[uuid.UUID] = Field(default=None, index=True)
    latency_ms: Optional[int] = None
    status_code: Optional[int] = None
    created_at: datetime = Field(default_factory=_utcnow)


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS: wire format is camelCase
# ─────────────────────────────────────────────

AnalysisType = Literal["performance", "ideas", "optimization"]
RequestType = Literal["creative", "concept", "tagline", "visual"]
Tone = Literal["professional", "casual", "humorous", "emotional"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CampaignSuggestionRequest(CamelModel):
    """Request body for POST /ai/campaign-suggestion."""

    campaign_id: uuid.UUID
    analysis_type: Optional[AnalysisType] = None
    additional_context: Optional[str] = None


class CreativeIdeaRequest(CamelModel):
    """Request body for POST /ai/creative-idea."""

    campaign_id: uuid.UUID
    concept_note_id: Optional[uuid.UUID] = None
    request_type: RequestType = "creative"
    brief: Optional[str] = None
    target_audience: Optional[str] = None
    tone: Optional[Tone] = None


class CampaignIdea(CamelModel):
    title: str = ""
    description: str = ""
    category: str = ""  # strategy | content | channel | timing
    priority: int = 2  # 1-3 by convention, not enforced


class CreativeIdea(CamelModel):
    title: str = ""
    description: str = ""
    type: str = ""  # concept | tagline | visual | story
    tags: List[str] = PydanticField(default_factory=list)
    rationale: Optional[str] = None


class PerformanceAnalysis(CamelModel):
    """Qualitative analysis from the model plus locally computed metrics."""

    summary: str = ""
    budget_utilization: float = 0.0
    advert_completion_rate: int = 0
    strengths: List[str] = PydanticField(default_factory=list)
    weaknesses: List[str] = PydanticField(default_factory=list)
    recommendations: List[str] = PydanticField(default_factory=list)


class CampaignSuggestionResponse(CamelModel):
    """Response for POST /ai/campaign-suggestion; also the export-pdf input."""

    campaign_id: uuid.UUID
    analysis_type: str = ""
    content: str = ""
    suggestions: List[str] = PydanticField(default_factory=list)
    ideas: List[CampaignIdea] = PydanticField(default_factory=list)
    performance_analysis: Optional[PerformanceAnalysis] = None
    generated_at: datetime = PydanticField(default_factory=_utcnow)


class CreativeIdeaResponse(CamelModel):
    """Response for POST /ai/creative-idea; also the export-pdf input."""

    campaign_id: uuid.UUID
    concept_note_id: Optional[uuid.UUID] = None
    request_type: str = ""
    content: str = ""
    suggestions: List[str] = PydanticField(default_factory=list)
    ideas: List[CreativeIdea] = PydanticField(default_factory=list)
    generated_at: datetime = PydanticField(default_factory=_utcnow)
