"""
Suggestion Report PDF Generator

Renders an already-computed campaign suggestion or creative idea response
as an A4 PDF. Nothing here calls the model or the database: the output
depends only on the response object, the campaign labels and `now`.
Uses reportlab Platypus for layout, in invariant mode so identical input
yields identical bytes. Text is set in DejaVu Sans (shipped with matplotlib)
so Turkish and other non-Latin-1 campaign data renders correctly.
"""
import io
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

import matplotlib
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer,
    PageBreak, HRFlowable,
)

from app.config import settings
from app.models.ai_models import CampaignSuggestionResponse, CreativeIdeaResponse

# ── Palette ──────────────────────────────────────
BLUE       = colors.HexColor("#1565c0")
PURPLE     = colors.HexColor("#6a1b9a")
PURPLE_BG  = colors.HexColor("#f3e5f5")
PURPLE_TAG = colors.HexColor("#ce93d8")
GREEN      = colors.HexColor("#2e7d32")
RED        = colors.HexColor("#c62828")
GREY_TEXT  = colors.HexColor("#616161")
GREY_LIGHT = colors.HexColor("#9e9e9e")
GREY_BG    = colors.HexColor("#eeeeee")
CARD_BG    = colors.HexColor("#f5f5f5")

PRIORITY_COLORS = {
    1: colors.HexColor("#a5d6a7"),
    2: colors.HexColor("#fff59d"),
}
PRIORITY_FALLBACK = colors.HexColor("#ffcc80")

PAGE_W, PAGE_H = A4
MARGIN = 2 * cm
CONTENT_W = PAGE_W - 2 * MARGIN - 12  # frame padding

# ── Fonts ──────────────────────────────────────
FONT = "DejaVuSans"
FONT_BOLD = "DejaVuSans-Bold"
FONT_ITALIC = "DejaVuSans-Oblique"
FONT_BOLD_ITALIC = "DejaVuSans-BoldOblique"


def _font_dir() -> Path:
    return Path(matplotlib.get_data_path()) / "fonts" / "ttf"


def register_fonts() -> None:
    """Register the DejaVu Sans family with reportlab (once per process)."""
    if FONT in pdfmetrics.getRegisteredFontNames():
        return
    font_dir = _font_dir()
    for name in (FONT, FONT_BOLD, FONT_ITALIC, FONT_BOLD_ITALIC):
        pdfmetrics.registerFont(TTFont(name, str(font_dir / f"{name}.ttf")))
    pdfmetrics.registerFontFamily(
        FONT, normal=FONT, bold=FONT_BOLD, italic=FONT_ITALIC, boldItalic=FONT_BOLD_ITALIC,
    )


def _styles(accent):
    """Build paragraph styles around the report's accent colour."""
    register_fonts()
    ss = getSampleStyleSheet()
    ss.add(ParagraphStyle(
        "ReportTitle", parent=ss["Title"],
        fontName=FONT_BOLD, fontSize=20, leading=24,
        textColor=accent, alignment=TA_LEFT, spaceAfter=4,
    ))
    ss.add(ParagraphStyle(
        "CampaignTitle", parent=ss["Normal"],
        fontName=FONT_BOLD, fontSize=14, leading=18, spaceAfter=2,
    ))
    ss.add(ParagraphStyle(
        "Meta", parent=ss["Normal"],
        fontName=FONT, fontSize=11, leading=14, textColor=GREY_TEXT,
    ))
    ss.add(ParagraphStyle(
        "DateStamp", parent=ss["Normal"],
        fontName=FONT, fontSize=9, leading=11,
        textColor=GREY_LIGHT, alignment=TA_RIGHT,
    ))
    ss.add(ParagraphStyle(
        "SectionHead", parent=ss["Heading2"],
        fontName=FONT_BOLD, fontSize=16, leading=20,
        textColor=accent, spaceBefore=12, spaceAfter=6,
    ))
    ss.add(ParagraphStyle(
        "Body", parent=ss["Normal"],
        fontName=FONT, fontSize=10, leading=15,
    ))
    ss.add(ParagraphStyle(
        "BulletLine", parent=ss["Normal"],
        fontName=FONT, bulletFontName=FONT, fontSize=10, leading=14,
        leftIndent=12, bulletIndent=0, spaceBefore=2,
    ))
    ss.add(ParagraphStyle(
        "CardTitle", parent=ss["Normal"],
        fontName=FONT_BOLD, fontSize=12, leading=15, textColor=accent,
    ))
    ss.add(ParagraphStyle(
        "CardNote", parent=ss["Normal"],
        fontName=FONT_ITALIC, fontSize=9, leading=13, textColor=GREY_TEXT,
    ))
    ss.add(ParagraphStyle(
        "Badge", parent=ss["Normal"],
        fontName=FONT_BOLD, fontSize=8, leading=10, alignment=TA_CENTER,
    ))
    ss.add(ParagraphStyle(
        "KpiLabel", parent=ss["Normal"],
        fontName=FONT, fontSize=9, leading=11, textColor=GREY_TEXT,
    ))
    ss.add(ParagraphStyle(
        "KpiValue", parent=ss["Normal"],
        fontName=FONT_BOLD, fontSize=14, leading=18, textColor=accent,
    ))
    return ss


def _text(value: Optional[str]) -> str:
    return escape(value or "")


def _header(ss, report_title: str, campaign_title: str, meta_line: str, now: datetime):
    left = [
        Paragraph(_text(report_title), ss["ReportTitle"]),
        Paragraph(_text(campaign_title), ss["CampaignTitle"]),
        Paragraph(_text(meta_line), ss["Meta"]),
    ]
    stamp = Paragraph(now.strftime("%d %b %Y"), ss["DateStamp"])
    t = Table([[left, stamp]], colWidths=[CONTENT_W - 3 * cm, 3 * cm])
    t.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    return [t, HRFlowable(width="100%", thickness=1, color=GREY_BG, spaceBefore=8, spaceAfter=8)]


def _bullets(ss, heading: str, items: List[str], head_color) -> list:
    if not items:
        return []
    head = ParagraphStyle(f"{heading}Head", parent=ss["SectionHead"], fontSize=14, textColor=head_color)
    flow = [Paragraph(_text(heading), head)]
    for item in items:
        flow.append(Paragraph(_text(item), ss["BulletLine"], bulletText="•"))
    return flow


def _card(rows: list, background) -> Table:
    t = Table([[r] for r in rows], colWidths=[CONTENT_W])
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), background),
        ("LEFTPADDING", (0, 0), (-1, -1), 12),
        ("RIGHTPADDING", (0, 0), (-1, -1), 12),
        ("TOPPADDING", (0, 0), (0, 0), 10),
        ("BOTTOMPADDING", (0, -1), (-1, -1), 10),
    ]))
    return t


def _footer_drawer(now: datetime):
    stamp = f"Generated on {now.strftime('%d %b %Y %H:%M')} by {settings.report_brand}"

    def _draw(canvas, doc):
        canvas.saveState()
        canvas.setFillColor(GREY_LIGHT)
        canvas.setFont(FONT, 8)
        canvas.drawCentredString(PAGE_W / 2, MARGIN / 2, f"{stamp} · Page {doc.page}")
        canvas.restoreState()

    return _draw


def _build(story: list, title: str, now: datetime) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        title=title,
        author=settings.report_brand,
        invariant=1,
    )
    draw = _footer_drawer(now)
    doc.build(story, onFirstPage=draw, onLaterPages=draw)
    return buf.getvalue()


def render_campaign_report_pdf(
    report: CampaignSuggestionResponse,
    campaign_title: str,
    client_name: str,
    now: Optional[datetime] = None,
) -> bytes:
    """Render a campaign suggestion response as a 'Campaign Analysis Report'."""
    now = now or datetime.now()
    ss = _styles(BLUE)
    story = _header(ss, "Campaign Analysis Report", campaign_title, f"Client: {client_name}", now)

    analysis = report.performance_analysis
    if analysis is not None:
        story.append(Paragraph("Summary", ss["SectionHead"]))
        story.append(Paragraph(_text(analysis.summary), ss["Body"]))
        story.append(Spacer(1, 10))

        kpis = Table(
            [
                [Paragraph("Budget Utilization", ss["KpiLabel"]),
                 Paragraph("Advert Completion Rate", ss["KpiLabel"])],
                [Paragraph(f"{analysis.budget_utilization:.1f}%", ss["KpiValue"]),
                 Paragraph(f"{analysis.advert_completion_rate}%", ss["KpiValue"])],
            ],
            colWidths=[CONTENT_W / 2] * 2,
        )
        kpis.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), GREY_BG),
            ("LINEAFTER", (0, 0), (0, -1), 4, colors.white),
            ("LEFTPADDING", (0, 0), (-1, -1), 10),
            ("TOPPADDING", (0, 0), (-1, 0), 10),
            ("BOTTOMPADDING", (0, 1), (-1, 1), 10),
        ]))
        story.append(kpis)

        story += _bullets(ss, "Strengths", analysis.strengths, GREEN)
        story += _bullets(ss, "Weaknesses", analysis.weaknesses, RED)
        story += _bullets(ss, "Recommendations", analysis.recommendations, BLUE)

    if report.ideas:
        story.append(PageBreak())
        story.append(Paragraph("Campaign Ideas", ss["SectionHead"]))
        for idea in report.ideas:
            badge = Table(
                [[Paragraph(f"Priority {idea.priority}", ss["Badge"])]],
                colWidths=[2.6 * cm],
            )
            badge.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, -1),
                 PRIORITY_COLORS.get(idea.priority, PRIORITY_FALLBACK)),
            ]))
            title_row = Table(
                [[Paragraph(_text(idea.title), ss["CardTitle"]), badge]],
                colWidths=[CONTENT_W - 24 - 2.8 * cm, 2.8 * cm],
            )
            title_row.setStyle(TableStyle([
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ]))
            rows = [title_row, Paragraph(_text(idea.description), ss["Body"])]
            if idea.category:
                rows.append(Paragraph(f"Category: {_text(idea.category)}", ss["CardNote"]))
            story.append(Spacer(1, 10))
            story.append(_card(rows, CARD_BG))

    if report.suggestions:
        story.append(Spacer(1, 8))
        story += _bullets(ss, "Additional Suggestions", report.suggestions, BLUE)

    return _build(story, f"Campaign Analysis Report: {campaign_title}", now)


def render_creative_idea_pdf(
    report: CreativeIdeaResponse,
    campaign_title: str,
    client_name: str,
    now: Optional[datetime] = None,
) -> bytes:
    """Render a creative idea response as a 'Creative Ideas Report'."""
    now = now or datetime.now()
    ss = _styles(PURPLE)
    story = _header(
        ss, "Creative Ideas Report", campaign_title,
        f"Client: {client_name} | Type: {report.request_type}", now,
    )

    if report.content:
        story.append(Paragraph("Overview", ss["SectionHead"]))
        story.append(Paragraph(_text(report.content), ss["Body"]))

    if report.ideas:
        story.append(Paragraph("Creative Ideas", ss["SectionHead"]))
        for idea in report.ideas:
            rows = [
                Paragraph(_text(idea.title), ss["CardTitle"]),
                Paragraph(_text(idea.description), ss["Body"]),
            ]
            if idea.rationale:
                rows.append(Paragraph(_text(idea.rationale), ss["CardNote"]))
            if idea.tags:
                tag_w = min(3 * cm, (CONTENT_W - 24) / len(idea.tags))
                tags = Table(
                    [[Paragraph(_text(tag), ss["Badge"]) for tag in idea.tags]],
                    colWidths=[tag_w] * len(idea.tags),
                    hAlign="LEFT",
                )
                tags.setStyle(TableStyle([
                    ("BACKGROUND", (0, 0), (-1, -1), PURPLE_TAG),
                    ("LINEAFTER", (0, 0), (-2, -1), 3, PURPLE_BG),
                ]))
                rows.append(tags)
            story.append(Spacer(1, 10))
            story.append(_card(rows, PURPLE_BG))

    if report.suggestions:
        story.append(Spacer(1, 8))
        story += _bullets(ss, "Additional Suggestions", report.suggestions, PURPLE)

    return _build(story, f"Creative Ideas Report: {campaign_title}", now)


def report_filename(prefix: str, campaign_title: str, now: Optional[datetime] = None) -> str:
    """e.g. Campaign_Report_Summer_Launch_20261018.pdf"""
    now = now or datetime.now()
    return f"{prefix}_{campaign_title.replace(' ', '_')}_{now.strftime('%Y%m%d')}.pdf"
