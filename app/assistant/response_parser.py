"""Agate AI — Model Output Repair & Parsing.

Model output is untrusted: it may be truncated, or valid JSON missing any
field. Parsing therefore happens in two stages:

1. repair_truncated_json / parse_ai_json — best-effort recovery of a JSON
   object from raw text, or UnparseableOutputError.
2. map_* — field-by-field mapping with empty defaults on absence.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from app.core.logging import get_logger
from app.models.ai_models import (
    CampaignIdea,
    CampaignSuggestionResponse,
    CreativeIdea,
    CreativeIdeaResponse,
    PerformanceAnalysis,
)

logger = get_logger("assistant.parser")

DEFAULT_IDEA_PRIORITY = 2


class UnparseableOutputError(Exception):
    """Raised when model output cannot be recovered as a JSON object."""

    def __init__(self, message: str, excerpt: str = ""):
        self.excerpt = excerpt
        super().__init__(message)


def repair_truncated_json(text: str) -> str:
    """Close unbalanced brackets and braces at the end of truncated output.

    Only counts are compared: missing `]` are appended first, then missing
    `}`. Mis-nested input is left as is.
    """
    cleaned = text.strip()
    if cleaned.endswith("}") or cleaned.endswith("]"):
        return cleaned

    missing_brackets = cleaned.count("[") - cleaned.count("]")
    missing_braces = cleaned.count("{") - cleaned.count("}")
    if missing_brackets > 0:
        cleaned += "]" * missing_brackets
    if missing_braces > 0:
        cleaned += "}" * missing_braces
    return cleaned


def _excerpt(raw: str) -> str:
    if len(raw) < 100:
        return f"Response too short: {raw}"
    return f"First 500 chars: {raw[:500]}..."


def parse_ai_json(raw: str) -> dict:
    """Repair and parse raw model output into a JSON object."""
    repaired = repair_truncated_json(raw)
    if repaired != raw.strip():
        logger.warning("Attempted to fix incomplete JSON response")

    try:
        data = json.loads(repaired)
    except json.JSONDecodeError as e:
        excerpt = _excerpt(raw)
        logger.error(
            f"Failed to parse AI JSON response. Original length: {len(raw)}, "
            f"Response: {raw[:500]}"
        )
        raise UnparseableOutputError(
            f"AI returned invalid or incomplete JSON. {excerpt}", excerpt
        ) from e

    if not isinstance(data, dict):
        excerpt = _excerpt(raw)
        raise UnparseableOutputError(
            f"AI returned JSON that is not an object. {excerpt}", excerpt
        )
    return data


# ── Field helpers ──


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str) and v]


def _dicts(value: Any) -> List[dict]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _priority(value: Any) -> int:
    # Out-of-range values pass through untouched
    if isinstance(value, bool):
        return DEFAULT_IDEA_PRIORITY
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return DEFAULT_IDEA_PRIORITY
    return DEFAULT_IDEA_PRIORITY


# ── Mapping ──


def map_campaign_ideas(data: dict) -> List[CampaignIdea]:
    ideas = [
        CampaignIdea(
            title=_str(idea.get("title")),
            description=_str(idea.get("description")),
            category=_str(idea.get("category")),
            priority=_priority(idea.get("priority", DEFAULT_IDEA_PRIORITY)),
        )
        for idea in _dicts(data.get("ideas"))
    ]
    return [i for i in ideas if i.title]


def map_creative_ideas(data: dict, request_type: str) -> List[CreativeIdea]:
    ideas = [
        CreativeIdea(
            title=_str(idea.get("title")),
            description=_str(idea.get("description")),
            type=_str(idea.get("type"), request_type),
            tags=_str_list(idea.get("tags")),
            rationale=idea.get("rationale") if isinstance(idea.get("rationale"), str) else None,
        )
        for idea in _dicts(data.get("ideas"))
    ]
    return [i for i in ideas if i.title]


def map_campaign_suggestion(
    data: dict,
    campaign_id: uuid.UUID,
    analysis_type: Optional[str],
    budget_utilization: float,
    advert_completion_rate: int,
) -> CampaignSuggestionResponse:
    """Build the campaign suggestion response from parsed model JSON.

    The two numeric metrics are passed in from local computation; whatever
    the model claims for them is ignored.
    """
    summary = _str(data.get("summary"))
    return CampaignSuggestionResponse(
        campaign_id=campaign_id,
        analysis_type=analysis_type or "performance",
        content=summary,
        suggestions=_str_list(data.get("suggestions")),
        ideas=map_campaign_ideas(data),
        performance_analysis=PerformanceAnalysis(
            summary=summary,
            budget_utilization=budget_utilization,
            advert_completion_rate=advert_completion_rate,
            strengths=_str_list(data.get("strengths")),
            weaknesses=_str_list(data.get("weaknesses")),
            recommendations=_str_list(data.get("recommendations")),
        ),
        generated_at=datetime.now(timezone.utc),
    )


def map_creative_idea(
    data: dict,
    campaign_id: uuid.UUID,
    concept_note_id: Optional[uuid.UUID],
    request_type: str,
) -> CreativeIdeaResponse:
    """Build the creative idea response from parsed model JSON."""
    return CreativeIdeaResponse(
        campaign_id=campaign_id,
        concept_note_id=concept_note_id,
        request_type=request_type,
        content=_str(data.get("content")),
        suggestions=_str_list(data.get("suggestions")),
        ideas=map_creative_ideas(data, request_type),
        generated_at=datetime.now(timezone.utc),
    )
