"""Agate AI — Prompt Builder.

Renders the instruction string sent to the model from a PromptContext. Each
prompt embeds a literal JSON example the model must mimic and ends with a
"return only JSON" directive. Pure functions: same input, same prompt.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from app.assistant.metrics import (
    compute_advert_completion_rate,
    compute_budget_utilization,
    count_completed,
)
from app.models.ai_models import CreativeIdeaRequest
from app.models.campaign_models import Campaign, ConceptNote


class ConceptNoteSnapshot(BaseModel):
    title: str
    content: str
    tags: List[str] = []


class PromptContext(BaseModel):
    """Read-only view of the campaign data a prompt is rendered from."""

    title: str
    client_name: str
    status: str
    description: Optional[str] = None
    estimated_budget: float = 0.0
    actual_cost: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    advert_count: int = 0
    completed_advert_count: int = 0
    budget_line_count: int = 0
    budget_utilization: float = 0.0
    advert_completion_rate: int = 0
    currency: str = "USD"
    concept_note: Optional[ConceptNoteSnapshot] = None

    @property
    def budget_variance(self) -> float:
        return self.actual_cost - self.estimated_budget


def build_prompt_context(
    campaign: Campaign,
    concept_note: Optional[ConceptNote] = None,
    currency: str = "USD",
) -> PromptContext:
    """Snapshot a loaded campaign (adverts, budget lines, client) for prompting."""
    statuses = [a.status for a in campaign.adverts]
    note = None
    if concept_note is not None:
        note = ConceptNoteSnapshot(
            title=concept_note.title,
            content=concept_note.content,
            tags=list(concept_note.tags or []),
        )

    return PromptContext(
        title=campaign.title,
        client_name=campaign.client.name if campaign.client else "",
        status=campaign.status,
        description=campaign.description,
        estimated_budget=campaign.estimated_budget,
        actual_cost=campaign.actual_cost,
        start_date=campaign.start_date,
        end_date=campaign.end_date,
        advert_count=len(statuses),
        completed_advert_count=count_completed(statuses),
        budget_line_count=len(campaign.budget_lines),
        budget_utilization=compute_budget_utilization(
            campaign.estimated_budget, campaign.actual_cost
        ),
        advert_completion_rate=compute_advert_completion_rate(statuses),
        currency=currency,
        concept_note=note,
    )


# ── Target JSON schemas ──

PERFORMANCE_SCHEMA = """Return JSON in this exact format:
{
  "summary": "Detailed performance summary text",
  "strengths": ["strength1", "strength2", "strength3"],
  "weaknesses": ["weakness1", "weakness2", "weakness3"],
  "recommendations": ["recommendation1", "recommendation2", "recommendation3"],
  "ideas": [
    {
      "title": "Idea title",
      "description": "Idea description",
      "category": "strategy|content|channel|timing",
      "priority": 1
    }
  ],
  "suggestions": ["suggestion1", "suggestion2"]
}"""

IDEAS_SCHEMA = """Return JSON in this exact format:
{
  "summary": "Brief summary of ideas",
  "strengths": [],
  "weaknesses": [],
  "recommendations": [],
  "ideas": [
    {
      "title": "Campaign idea title",
      "description": "Detailed description of the idea",
      "category": "strategy|content|channel|timing",
      "priority": 2
    }
  ],
  "suggestions": ["suggestion1", "suggestion2", "suggestion3"]
}"""

GENERAL_SCHEMA = """Return JSON in this exact format:
{
  "summary": "Comprehensive analysis summary",
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "recommendations": ["recommendation1", "recommendation2", "recommendation3"],
  "ideas": [
    {
      "title": "Idea title",
      "description": "Idea description",
      "category": "strategy|content|channel|timing",
      "priority": 2
    }
  ],
  "suggestions": ["suggestion1", "suggestion2"]
}"""

CREATIVE_SCHEMA = """Return JSON in this exact format:
{
  "content": "Overall creative concept summary",
  "ideas": [
    {
      "title": "Creative idea title",
      "description": "Detailed description of the creative idea",
      "type": "%s",
      "tags": ["tag1", "tag2", "tag3"],
      "rationale": "Why this idea works"
    }
  ],
  "suggestions": ["suggestion1", "suggestion2", "suggestion3"]
}"""

JSON_ONLY_DIRECTIVE = (
    "IMPORTANT: Return ONLY the JSON object. No markdown, no code blocks, "
    "no explanations. Just the raw JSON."
)


def _money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def _date(value: Optional[date]) -> str:
    return value.isoformat() if value else "N/A"


def build_campaign_analysis_prompt(
    context: PromptContext,
    analysis_type: Optional[str] = None,
    additional_context: Optional[str] = None,
) -> str:
    """Prompt for POST /ai/campaign-suggestion."""
    c = context
    prompt = (
        "Analyze the following campaign and return ONLY valid JSON. "
        "Do not include any text before or after the JSON.\n"
        "\n"
        "Campaign Data:\n"
        f"- Title: {c.title}\n"
        f"- Client: {c.client_name}\n"
        f"- Status: {c.status}\n"
        f"- Description: {c.description or 'N/A'}\n"
        f"- Budget: {_money(c.estimated_budget, c.currency)}\n"
        f"- Actual Cost: {_money(c.actual_cost, c.currency)}\n"
        f"- Budget Variance: {_money(c.budget_variance, c.currency)}\n"
        f"- Start Date: {_date(c.start_date)}\n"
        f"- End Date: {_date(c.end_date)}\n"
        f"- Total Adverts: {c.advert_count}\n"
        f"- Completed Adverts: {c.completed_advert_count}\n"
        f"- Budget Lines: {c.budget_line_count}\n"
        f"- Budget Utilization: {c.budget_utilization:.1f}%\n"
        f"- Advert Completion Rate: {c.advert_completion_rate}%\n"
        "\n"
    )

    if analysis_type == "performance":
        prompt += PERFORMANCE_SCHEMA
    elif analysis_type == "ideas":
        prompt += IDEAS_SCHEMA
    else:
        prompt += GENERAL_SCHEMA

    if additional_context:
        prompt += f"\n\nAdditional Context: {additional_context}\n"

    prompt += "\n\n" + JSON_ONLY_DIRECTIVE
    return prompt


def build_creative_idea_prompt(
    context: PromptContext, request: CreativeIdeaRequest
) -> str:
    """Prompt for POST /ai/creative-idea."""
    c = context
    prompt = (
        "Generate creative ideas for the following campaign and return ONLY "
        "valid JSON. Do not include any text before or after the JSON.\n"
        "\n"
        "Campaign Data:\n"
        f"- Title: {c.title}\n"
        f"- Client: {c.client_name}\n"
        f"- Description: {c.description or 'N/A'}\n"
        f"- Request Type: {request.request_type}\n"
    )

    if c.concept_note is not None:
        note = c.concept_note
        prompt += (
            "- Existing Concept Note:\n"
            f"  Title: {note.title}\n"
            f"  Content: {note.content}\n"
            f"  Tags: {', '.join(note.tags)}\n"
        )

    if request.brief:
        prompt += f"- Brief: {request.brief}\n"
    if request.target_audience:
        prompt += f"- Target Audience: {request.target_audience}\n"
    if request.tone:
        prompt += f"- Tone: {request.tone}\n"

    prompt += "\n\n" + (CREATIVE_SCHEMA % request.request_type)
    prompt += "\n\n" + JSON_ONLY_DIRECTIVE
    return prompt
