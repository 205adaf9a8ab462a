"""
Export service - plain-text and PDF renditions of a project bundle
"""
import io
import logging
import re
from typing import List, Tuple
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib import colors
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.enums import TA_CENTER

from models.project import Project, ProjectKind

logger = logging.getLogger(__name__)

BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*")
ITALIC_PATTERN = re.compile(r"\*(.+?)\*")
BULLET_PATTERN = re.compile(r"^[-*]\s+")


def project_sections(project: Project) -> List[Tuple[str, str]]:
    """(heading, body) pairs in display order"""
    details = project.resources
    if details is None:
        return []

    if project.kind == ProjectKind.SOFTWARE:
        return [
            ("Product Requirements Document (PRD)", details.prd.strip()),
            ("Recommended Tech Stack", "- " + "\n- ".join(details.tech_stack)),
            ("UI Mockup URL", details.ui_mockups[0] if details.ui_mockups else ""),
            ("System Architecture Diagram URL", details.architecture_diagram),
        ]
    return [
        ("Technical Blueprint", details.blueprint.strip()),
        ("Materials Required", details.materials_list.strip()),
        ("Build Guide", details.build_guide.strip()),
        ("Schematics URL", details.schematics[0] if details.schematics else ""),
    ]


class ExportService:
    """Handle project exports"""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles"""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            textColor=colors.HexColor('#1a1a1a'),
            spaceAfter=30,
            alignment=TA_CENTER
        ))

        self.styles.add(ParagraphStyle(
            name='CustomHeading',
            parent=self.styles['Heading2'],
            fontSize=16,
            textColor=colors.HexColor('#2563eb'),
            spaceAfter=12,
            spaceBefore=12
        ))

    def format_text(self, project: Project) -> str:
        """Clipboard-style text export"""
        output = f"Project Name: {project.name}\n"
        output += f"Description: {project.description}\n\n"
        output += "====================================\n\n"
        for heading, body in project_sections(project):
            output += f"## {heading}\n\n{body}\n\n"
        return output

    def render_pdf(self, project: Project) -> bytes:
        """Render the project as a PDF document"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=72,
            leftMargin=72,
            topMargin=72,
            bottomMargin=18,
            title=project.name,
        )

        story = []
        story.append(Paragraph(escape(project.name), self.styles['CustomTitle']))
        story.append(Spacer(1, 0.2 * inch))

        info = Table([
            ["Type:", project.kind.value.capitalize()],
            ["Created:", project.created_at or "N/A"],
            ["Description:", Paragraph(escape(project.description), self.styles['Normal'])],
        ], colWidths=[1.5 * inch, 4.5 * inch])
        info.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#555555')),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        story.append(info)
        story.append(Spacer(1, 0.3 * inch))

        for heading, body in project_sections(project):
            story.append(Paragraph(escape(heading), self.styles['CustomHeading']))
            story.extend(self._markdown_flowables(body))

        doc.build(story)
        logger.info(f"Generated PDF export for project {project.id}")
        return buffer.getvalue()

    def _markdown_flowables(self, text: str) -> list:
        """Minimal markdown: headings, bullets and bold/italic spans"""
        flowables = []
        for raw in text.splitlines():
            line = raw.strip()
            if not line:
                flowables.append(Spacer(1, 0.08 * inch))
                continue

            style = self.styles['Normal']
            if line.startswith("#"):
                line = line.lstrip("#").strip()
                style = self.styles['Heading3']
            elif BULLET_PATTERN.match(line):
                line = "• " + BULLET_PATTERN.sub("", line, count=1)

            markup = escape(line)
            markup = BOLD_PATTERN.sub(r"<b>\1</b>", markup)
            markup = ITALIC_PATTERN.sub(r"<i>\1</i>", markup)
            flowables.append(Paragraph(markup, style))
        return flowables
