"""Agate AI — Suggestion Pipeline Orchestrator.

Runs the per-request flow:
  load campaign → build prompt → generate (mock on failure) → repair/parse
  → map + local metrics → snapshot (best-effort)

Audit logging wraps the whole HTTP request and lives in app.core.audit.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session

from app.ai.generator import TextGenerator
from app.assistant.prompt_builder import (
    PromptContext,
    build_campaign_analysis_prompt,
    build_creative_idea_prompt,
    build_prompt_context,
)
from app.assistant.response_parser import (
    map_campaign_suggestion,
    map_creative_idea,
    parse_ai_json,
)
from app.config import settings
from app.core.logging import get_logger
from app.models.ai_models import (
    AiSuggestion,
    CampaignSuggestionRequest,
    CampaignSuggestionResponse,
    CreativeIdeaRequest,
    CreativeIdeaResponse,
)
from app.models.campaign_models import Campaign, ConceptNote

logger = get_logger("assistant.pipeline")


class CampaignNotFoundError(Exception):
    """Raised when the requested campaign does not exist."""

    def __init__(self, campaign_id: uuid.UUID):
        self.campaign_id = campaign_id
        super().__init__("Campaign not found")


def load_campaign(session: Session, campaign_id: uuid.UUID) -> Campaign:
    campaign = session.get(Campaign, campaign_id)
    if campaign is None:
        raise CampaignNotFoundError(campaign_id)
    return campaign


def load_concept_note(
    session: Session, concept_note_id: Optional[uuid.UUID]
) -> Optional[ConceptNote]:
    if concept_note_id is None:
        return None
    note = session.get(ConceptNote, concept_note_id)
    if note is None:
        logger.warning(f"Concept note {concept_note_id} not found; continuing without it")
    return note


def _prompt_snapshot(request, context: PromptContext, prompt: str) -> dict:
    return {
        "request": request.model_dump(mode="json"),
        "context": context.model_dump(mode="json"),
        "prompt": prompt,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def save_ai_suggestion(
    session: Session,
    campaign_id: Optional[uuid.UUID],
    author_user_id: Optional[uuid.UUID],
    kind: str,
    prompt_snapshot: dict,
    result: dict,
) -> Optional[AiSuggestion]:
    """Persist a suggestion snapshot. Failures are logged, never raised."""
    try:
        suggestion = AiSuggestion(
            campaign_id=campaign_id,
            author_user_id=author_user_id,
            kind=kind,
            prompt_snapshot=prompt_snapshot,
            result=result,
        )
        session.add(suggestion)
        session.commit()
        logger.info(
            f"AI suggestion saved: {suggestion.id}, kind: {kind}",
            extra={"campaign_id": str(campaign_id)},
        )
        return suggestion
    except Exception as e:
        session.rollback()
        logger.error(f"Error saving AI suggestion to database: {e}", exc_info=True)
        return None


async def run_campaign_suggestion(
    session: Session,
    generator: TextGenerator,
    request: CampaignSuggestionRequest,
    user_id: Optional[uuid.UUID] = None,
) -> CampaignSuggestionResponse:
    """Analyse a campaign and return performance analysis plus ideas."""
    campaign = load_campaign(session, request.campaign_id)
    context = build_prompt_context(campaign, currency=settings.currency)
    prompt = build_campaign_analysis_prompt(
        context, request.analysis_type, request.additional_context
    )

    raw = await generator.generate(
        prompt, {"campaign_id": str(campaign.id), "campaign_title": campaign.title}
    )
    data = parse_ai_json(raw)

    response = map_campaign_suggestion(
        data,
        campaign_id=request.campaign_id,
        analysis_type=request.analysis_type,
        budget_utilization=context.budget_utilization,
        advert_completion_rate=context.advert_completion_rate,
    )

    save_ai_suggestion(
        session,
        campaign_id=request.campaign_id,
        author_user_id=user_id,
        kind=f"campaign_suggestion_{request.analysis_type or 'performance'}",
        prompt_snapshot=_prompt_snapshot(request, context, prompt),
        result=response.model_dump(mode="json", by_alias=True),
    )
    return response


async def run_creative_idea(
    session: Session,
    generator: TextGenerator,
    request: CreativeIdeaRequest,
    user_id: Optional[uuid.UUID] = None,
) -> CreativeIdeaResponse:
    """Generate creative ideas for a campaign, optionally seeded by a concept note."""
    campaign = load_campaign(session, request.campaign_id)
    concept_note = load_concept_note(session, request.concept_note_id)
    context = build_prompt_context(campaign, concept_note, currency=settings.currency)
    prompt = build_creative_idea_prompt(context, request)

    raw = await generator.generate(
        prompt,
        {
            "campaign_id": str(campaign.id),
            "campaign_title": campaign.title,
            "request_type": request.request_type,
        },
    )
    data = parse_ai_json(raw)

    response = map_creative_idea(
        data,
        campaign_id=request.campaign_id,
        concept_note_id=request.concept_note_id,
        request_type=request.request_type,
    )

    save_ai_suggestion(
        session,
        campaign_id=request.campaign_id,
        author_user_id=user_id,
        kind=f"creative_idea_{request.request_type}",
        prompt_snapshot=_prompt_snapshot(request, context, prompt),
        result=response.model_dump(mode="json", by_alias=True),
    )
    return response
