"""
PDF report generation service.
"""
import logging
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from web.services.content import LABEL_DATE, LABEL_FINAL, LABEL_TEACHER, CriteriaTable, ReportContent, build_report_content
from web.services.models import Report, Teacher

logger = logging.getLogger(__name__)

DEFAULT_FONT_PATH = Path(__file__).resolve().parent.parent.parent / "assets" / "fonts" / "DejaVuSans.ttf"
FALLBACK_FONT_NAME = "Helvetica"

HEADER_COLOR = colors.HexColor("#16786D")
GROUP_HEADER_COLOR = colors.HexColor("#4B5563")
GRID_COLOR = colors.HexColor("#2C3E50")


def rtl(text: str) -> str:
    """
    Reverse word order so right-to-left text reads correctly on a
    left-to-right canvas. Glyph shaping and mixed-direction runs are not
    handled.
    """
    return " ".join(reversed(str(text).split()))


def register_font(font_path: Optional[Path]) -> str:
    """
    Register an Arabic-capable TTF font under its file stem, returning the
    font name to use.
    """
    if font_path is None or not Path(font_path).exists():
        logger.warning(f"PDF font not found at {font_path}; falling back to {FALLBACK_FONT_NAME}")
        return FALLBACK_FONT_NAME
    font_name = Path(font_path).stem
    if font_name in pdfmetrics.getRegisteredFontNames():
        return font_name
    try:
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
    except (TTFError, OSError) as exc:
        logger.warning(f"Could not load PDF font {font_path}: {exc}")
        return FALLBACK_FONT_NAME
    return font_name


class ReportService:
    """Generates right-aligned PDF evaluation reports."""

    def __init__(self, font_path: Optional[Path] = DEFAULT_FONT_PATH):
        self.font_name = register_font(font_path)
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            'RtlTitle', parent=styles['Heading2'], fontName=self.font_name, fontSize=14,
            textColor=GRID_COLOR, alignment=TA_RIGHT, spaceAfter=6,
        )
        self.body_style = ParagraphStyle(
            'RtlBody', parent=styles['Normal'], fontName=self.font_name, fontSize=11,
            leading=16, alignment=TA_RIGHT, spaceAfter=4,
        )
        self.cell_style = ParagraphStyle(
            'RtlCell', parent=self.body_style, fontSize=10, leading=13, spaceAfter=0,
        )
        self.header_cell_style = ParagraphStyle(
            'RtlHeaderCell', parent=self.cell_style, textColor=colors.white,
        )

    def _paragraph(self, text: str, style: Optional[ParagraphStyle] = None) -> Paragraph:
        return Paragraph(escape(rtl(text)), style or self.body_style)

    def _cell(self, text: str, style: Optional[ParagraphStyle] = None) -> Paragraph:
        # Paragraph cells wrap to the column width
        return self._paragraph(text, style or self.cell_style)

    def _criteria_table(self, table: CriteriaTable) -> Table:
        # Columns run right to left: the criterion sits in the rightmost cell
        if table.title is None:
            data = [[rtl("النسبة"), rtl("الدرجة"), rtl("المعيار")]]
            data += [[f"%{row.rounded_percentage}", str(row.score), self._cell(row.label)] for row in table.rows]
            col_widths = [30*mm, 25*mm, 115*mm]
            header_color = HEADER_COLOR
        else:
            data = [[self._cell(table.title, self.header_cell_style), ""]]
            data += [[str(row.score), self._cell(row.label)] for row in table.rows]
            col_widths = [30*mm, 140*mm]
            header_color = GROUP_HEADER_COLOR

        pdf_table = Table(data, hAlign='RIGHT', colWidths=col_widths, repeatRows=1)
        style = TableStyle([
            ('FONTNAME', (0, 0), (-1, -1), self.font_name),
            ('BACKGROUND', (0, 0), (-1, 0), header_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
            ('ALIGN', (0, 1), (-2, -1), 'CENTER'),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 6),
            ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ])
        if table.title is not None:
            style.add('SPAN', (0, 0), (-1, 0))
        pdf_table.setStyle(style)
        return pdf_table

    def build_story(self, content: ReportContent) -> list:
        """Flowables for one report, top to bottom."""
        elements = [
            self._paragraph(f"{LABEL_TEACHER}: {content.teacher_name}", self.title_style),
            self._paragraph(f"{LABEL_DATE}: {content.date}"),
            self._paragraph(" | ".join(f"{label}: {value}" for label, value in content.location)),
            Spacer(1, 6),
            self._paragraph(content.heading, self.title_style),
        ]
        elements += [self._paragraph(f"{label}: {value}") for label, value in content.kind_fields]
        elements.append(Spacer(1, 6))
        for table in content.tables:
            elements.append(self._criteria_table(table))
            elements.append(Spacer(1, 8))
        elements.append(self._paragraph(f"{LABEL_FINAL}: {content.final_percentage_text}", self.title_style))
        elements += [self._paragraph(f"{label}: {value}") for label, value in content.narrative]
        return elements

    def build_aggregated_story(self, contents: Iterable[ReportContent]) -> list:
        """One report per page: a page break precedes every report after the first."""
        elements: list = []
        for index, content in enumerate(contents):
            if index > 0:
                elements.append(PageBreak())
            elements.extend(self.build_story(content))
        return elements

    def _render(self, elements: list, title: str) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=A4, title=title,
            rightMargin=15*mm, leftMargin=15*mm, topMargin=20*mm, bottomMargin=20*mm,
        )
        if not elements:
            elements = [Spacer(1, 1)]
        doc.build(elements)
        return buffer.getvalue()

    def generate_report_pdf(self, report: Report, teacher: Teacher) -> bytes:
        content = build_report_content(report, teacher)
        pdf_bytes = self._render(self.build_story(content), title=f"report_{teacher.name}_{content.date}")
        logger.info(f"Generated PDF report {report.id} for {teacher.name}")
        return pdf_bytes

    def generate_aggregated_pdf(self, pairs: List[Tuple[Report, Teacher]]) -> bytes:
        contents = [build_report_content(report, teacher) for report, teacher in pairs]
        pdf_bytes = self._render(self.build_aggregated_story(contents), title="aggregated_reports")
        logger.info(f"Generated aggregated PDF with {len(contents)} report(s)")
        return pdf_bytes
