"""Agate AI — Suggestion & Export Routes."""

import re
import unicodedata
import uuid
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from sqlmodel import Session

from app.ai.generator import TextGenerator, get_text_generator
from app.assistant.pipeline import (
    CampaignNotFoundError,
    load_campaign,
    run_campaign_suggestion,
    run_creative_idea,
)
from app.assistant.response_parser import UnparseableOutputError
from app.core.auth import get_current_user_id
from app.core.logging import get_logger
from app.database import get_session
from app.models.ai_models import (
    CampaignSuggestionRequest,
    CampaignSuggestionResponse,
    CreativeIdeaRequest,
    CreativeIdeaResponse,
)
from app.reports.suggestion_pdf import (
    render_campaign_report_pdf,
    render_creative_idea_pdf,
    report_filename,
)

logger = get_logger("api.ai")

router = APIRouter(
    prefix="/ai", tags=["AI"], dependencies=[Depends(get_current_user_id)]
)


def _campaign_labels(session: Session, campaign_id: uuid.UUID) -> tuple[str, str]:
    try:
        campaign = load_campaign(session, campaign_id)
    except CampaignNotFoundError:
        raise HTTPException(status_code=404, detail="Campaign not found")
    client_name = campaign.client.name if campaign.client else ""
    return campaign.title, client_name


def content_disposition(filename: str) -> str:
    """Attachment header safe for any campaign title.

    Header values must be Latin-1, so an ASCII `filename` is sent alongside
    the RFC 5987 `filename*` carrying the real UTF-8 name.
    """
    decomposed = unicodedata.normalize("NFKD", filename)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    fallback = re.sub(r"[^\x20-\x7e]", "_", stripped).replace('"', "").replace("\\", "")
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )


# ── Generation ──


@router.post("/campaign-suggestion", response_model=CampaignSuggestionResponse)
async def campaign_suggestion(
    payload: CampaignSuggestionRequest,
    request: Request,
    session: Session = Depends(get_session),
    generator: TextGenerator = Depends(get_text_generator),
    user_id: Optional[uuid.UUID] = Depends(get_current_user_id),
):
    """Campaign performance analysis and idea suggestions for campaign managers."""
    request.state.campaign_id = payload.campaign_id
    try:
        return await run_campaign_suggestion(session, generator, payload, user_id)
    except CampaignNotFoundError:
        raise HTTPException(status_code=404, detail="Campaign not found")
    except UnparseableOutputError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating campaign suggestion: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred while generating campaign suggestion: {e}",
        )


@router.post("/creative-idea", response_model=CreativeIdeaResponse)
async def creative_idea(
    payload: CreativeIdeaRequest,
    request: Request,
    session: Session = Depends(get_session),
    generator: TextGenerator = Depends(get_text_generator),
    user_id: Optional[uuid.UUID] = Depends(get_current_user_id),
):
    """Creative idea support for creative staff."""
    request.state.campaign_id = payload.campaign_id
    try:
        return await run_creative_idea(session, generator, payload, user_id)
    except CampaignNotFoundError:
        raise HTTPException(status_code=404, detail="Campaign not found")
    except UnparseableOutputError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating creative idea: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred while generating creative idea: {e}",
        )


# ── PDF export (from an already-obtained response) ──


@router.post("/campaign-suggestion/export-pdf")
async def export_campaign_suggestion_pdf(
    report: CampaignSuggestionResponse,
    session: Session = Depends(get_session),
):
    """Export a campaign suggestion report as PDF."""
    title, client_name = _campaign_labels(session, report.campaign_id)
    try:
        pdf_bytes = render_campaign_report_pdf(report, title, client_name)
    except Exception as e:
        logger.error(f"Error generating PDF for campaign suggestion: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating PDF: {e}")
    return _pdf_response(pdf_bytes, report_filename("Campaign_Report", title))


@router.post("/creative-idea/export-pdf")
async def export_creative_idea_pdf(
    report: CreativeIdeaResponse,
    session: Session = Depends(get_session),
):
    """Export a creative idea report as PDF."""
    title, client_name = _campaign_labels(session, report.campaign_id)
    try:
        pdf_bytes = render_creative_idea_pdf(report, title, client_name)
    except Exception as e:
        logger.error(f"Error generating PDF for creative idea: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating PDF: {e}")
    return _pdf_response(pdf_bytes, report_filename("Creative_Ideas", title))
