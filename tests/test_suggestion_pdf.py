"""PDF rendering tests: output is a function of the response, labels and clock only."""
import uuid
from datetime import datetime

from app.models.ai_models import (
    CampaignIdea,
    CampaignSuggestionResponse,
    CreativeIdea,
    CreativeIdeaResponse,
    PerformanceAnalysis,
)
from app.reports.suggestion_pdf import (
    render_campaign_report_pdf,
    render_creative_idea_pdf,
    report_filename,
)

NOW = datetime(2026, 10, 18, 9, 30)
CAMPAIGN_ID = uuid.UUID("aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee")


def _campaign_report(**overrides):
    base = dict(
        campaign_id=CAMPAIGN_ID,
        analysis_type="performance",
        content="Spend is on track",
        suggestions=["Shift budget to reels"],
        ideas=[
            CampaignIdea(title="Picnic reels", description="Short videos", category="content", priority=1),
            CampaignIdea(title="Late push", description="Final week", category="timing", priority=5),
        ],
        performance_analysis=PerformanceAnalysis(
            summary="Spend is on track",
            budget_utilization=25.0,
            advert_completion_rate=25,
            strengths=["Clear audience"],
            weaknesses=["Slow production"],
            recommendations=["Clear the backlog <soon> & often"],
        ),
        generated_at=NOW,
    )
    base.update(overrides)
    return CampaignSuggestionResponse(**base)


def _creative_report():
    return CreativeIdeaResponse(
        campaign_id=CAMPAIGN_ID,
        request_type="concept",
        content="Warm family moments",
        ideas=[
            CreativeIdea(
                title="Picnic for all",
                description="A shared blanket",
                type="concept",
                tags=["summer", "family", "outdoor"],
                rationale="Matches the audience",
            ),
            CreativeIdea(title="No tags", description="Plain", type="visual"),
        ],
        suggestions=["Keep copy short"],
        generated_at=NOW,
    )


def test_campaign_pdf_is_a_pdf():
    pdf = render_campaign_report_pdf(_campaign_report(), "Summer Launch", "Acme Foods", now=NOW)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_campaign_pdf_is_deterministic():
    a = render_campaign_report_pdf(_campaign_report(), "Summer Launch", "Acme Foods", now=NOW)
    b = render_campaign_report_pdf(_campaign_report(), "Summer Launch", "Acme Foods", now=NOW)
    assert a == b


def test_campaign_pdf_without_analysis_or_ideas():
    report = _campaign_report(performance_analysis=None, ideas=[], suggestions=[])
    pdf = render_campaign_report_pdf(report, "Summer Launch", "", now=NOW)
    assert pdf.startswith(b"%PDF")


def test_creative_pdf_is_deterministic():
    a = render_creative_idea_pdf(_creative_report(), "Summer Launch", "Acme Foods", now=NOW)
    b = render_creative_idea_pdf(_creative_report(), "Summer Launch", "Acme Foods", now=NOW)
    assert a.startswith(b"%PDF")
    assert a == b


def test_report_filename():
    assert report_filename("Campaign_Report", "Summer Launch", NOW) == "Campaign_Report_Summer_Launch_20261018.pdf"
    assert report_filename("Creative_Ideas", "Q4", NOW) == "Creative_Ideas_Q4_20261018.pdf"


def test_styles_use_unicode_font():
    from app.reports.suggestion_pdf import BLUE, FONT, FONT_BOLD, _styles
    from reportlab.pdfbase import pdfmetrics

    ss = _styles(BLUE)
    assert ss["Body"].fontName == FONT
    assert ss["ReportTitle"].fontName == FONT_BOLD
    assert FONT in pdfmetrics.getRegisteredFontNames()


def test_turkish_text_is_embedded_with_unicode_font():
    report = _campaign_report(
        content="Güçlü başlangıç",
        performance_analysis=PerformanceAnalysis(summary="Işıklı, şık ve doğal", strengths=["Öğretici içerik"]),
    )
    pdf = render_campaign_report_pdf(report, "Yaz Kampanyası", "Çiçek Gıda", now=NOW)
    assert pdf.startswith(b"%PDF")
    assert b"DejaVuSans" in pdf


def test_document_title_metadata_is_plain_ascii():
    pdf = render_campaign_report_pdf(_campaign_report(), "Summer Launch", "Acme Foods", now=NOW)
    assert b"(Campaign Analysis Report: Summer Launch)" in pdf
    creative = render_creative_idea_pdf(_creative_report(), "Summer Launch", "Acme Foods", now=NOW)
    assert b"(Creative Ideas Report: Summer Launch)" in creative
