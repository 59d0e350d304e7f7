from __future__ import annotations

import html
import io
from typing import Any

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from cvbuilder.schemas.cv import CVContent

_MARGIN = 50


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("CvTitle", parent=base["Title"], fontSize=24, leading=28, spaceAfter=14),
        "section": ParagraphStyle(
            "CvSection", parent=base["Heading2"], fontSize=18, leading=22, spaceBefore=10, spaceAfter=6
        ),
        "entry": ParagraphStyle("CvEntry", parent=base["BodyText"], fontName="Helvetica-Bold", fontSize=12, leading=15),
        "body": ParagraphStyle("CvBody", parent=base["BodyText"], fontSize=11, leading=14),
    }


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(html.escape(text).replace("\n", "<br/>"), style)


def _date_range(start: str, end: str | None) -> str:
    return f"{start} - {end or 'Present'}"


def build_story(title: str, cv: CVContent) -> list[Any]:
    styles = _styles()
    info = cv.personal_info
    story: list[Any] = [_p(title, styles["title"])]

    story.append(_p("Personal Information", styles["section"]))
    story.append(_p(f"Name: {info.full_name}", styles["body"]))
    story.append(_p(f"Email: {info.email}", styles["body"]))
    story.append(_p(f"Phone: {info.phone}", styles["body"]))
    if info.address:
        story.append(_p(f"Address: {info.address}", styles["body"]))
    if info.summary:
        story.append(Spacer(1, 6))
        story.append(_p("Summary:", styles["entry"]))
        story.append(_p(info.summary, styles["body"]))

    if cv.education:
        story.append(_p("Education", styles["section"]))
        for entry in cv.education:
            story.append(_p(f"{entry.degree} in {entry.field}", styles["entry"]))
            story.append(_p(entry.institution, styles["body"]))
            story.append(_p(_date_range(entry.start_date, entry.end_date), styles["body"]))
            if entry.description:
                story.append(_p(entry.description, styles["body"]))
            story.append(Spacer(1, 6))

    if cv.experience:
        story.append(_p("Experience", styles["section"]))
        for entry in cv.experience:
            story.append(_p(entry.position, styles["entry"]))
            story.append(_p(entry.company, styles["body"]))
            story.append(_p(_date_range(entry.start_date, entry.end_date), styles["body"]))
            if entry.description:
                story.append(_p(entry.description, styles["body"]))
            story.append(Spacer(1, 6))

    if cv.skills:
        story.append(_p("Skills", styles["section"]))
        story.append(_p(", ".join(cv.skills), styles["body"]))

    return story


def render_cv_pdf(title: str, cv: CVContent) -> bytes:
    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=_MARGIN,
        rightMargin=_MARGIN,
        topMargin=_MARGIN,
        bottomMargin=_MARGIN,
        title=title,
        author=cv.personal_info.full_name or "CV Builder",
    )
    doc.build(build_story(title, cv))
    output.seek(0)
    return output.getvalue()
