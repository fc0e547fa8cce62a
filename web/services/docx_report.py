"""
DocX Report Generation Service.

Word document rendering of evaluation reports using python-docx. Word lays
out right-to-left text natively, so runs are flagged RTL instead of being
word-reversed as in the PDF output.
"""
from __future__ import annotations

import io
import logging
from typing import List, Optional, Sequence, Tuple

from docx import Document
from docx.enum.table import WD_TABLE_DIRECTION
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt

from web.services.content import (
    LABEL_DATE,
    LABEL_FINAL,
    LABEL_TEACHER,
    CriteriaTable,
    ReportContent,
    build_report_content,
)
from web.services.models import MAX_CRITERION_SCORE, Report, Teacher

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Arial"


class DocxReportGenerator:
    """
    Word document report generator.

    Each report is written as heading paragraphs, the location line, one
    table per criteria section, the final percentage and the narrative
    fields. Aggregated documents start every report after the first on a new
    page.
    """

    def __init__(self, font_name: str = DEFAULT_FONT):
        self.font_name = font_name

    def _add_paragraph(self, container, text: str, bold: bool = False, size: Optional[int] = None):
        paragraph = container.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        run = paragraph.add_run(text)
        run.bold = bold
        run.font.rtl = True
        run.font.name = self.font_name
        # Complex-script font slot is the one Word uses for Arabic
        run._element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:cs"), self.font_name)
        if size:
            run.font.size = Pt(size)
        return paragraph

    def _set_cell(self, cell, value, bold: bool = False) -> None:
        cell.text = ""
        paragraph = cell.paragraphs[0]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        run = paragraph.add_run(str(value))
        run.bold = bold
        run.font.rtl = True
        run.font.name = self.font_name

    def _add_table(self, document, table: CriteriaTable) -> None:
        if table.title is None:
            headers = ["المعيار", "الدرجة", "النسبة"]
            body = [[row.label, f"{row.score} / {MAX_CRITERION_SCORE}", row.percentage_text] for row in table.rows]
        else:
            headers = [table.title, "الدرجة"]
            body = [[row.label, f"{row.score} / {MAX_CRITERION_SCORE}"] for row in table.rows]

        docx_table = document.add_table(rows=1, cols=len(headers))
        docx_table.style = "Table Grid"
        docx_table.table_direction = WD_TABLE_DIRECTION.RTL
        for cell, header in zip(docx_table.rows[0].cells, headers):
            self._set_cell(cell, header, bold=True)
        for values in body:
            cells = docx_table.add_row().cells
            for cell, value in zip(cells, values):
                self._set_cell(cell, value)

    def write_report(self, document, content: ReportContent) -> None:
        """Append one report's content to ``document``."""
        self._add_paragraph(document, f"{LABEL_TEACHER}: {content.teacher_name}", bold=True, size=14)
        self._add_paragraph(document, f"{LABEL_DATE}: {content.date}")
        self._add_paragraph(document, " | ".join(f"{label}: {value}" for label, value in content.location))
        self._add_paragraph(document, content.heading, bold=True, size=13)
        for label, value in content.kind_fields:
            self._add_paragraph(document, f"{label}: {value}")
        for table in content.tables:
            self._add_table(document, table)
            self._add_paragraph(document, "")
        self._add_paragraph(document, f"{LABEL_FINAL}: {content.final_percentage_text}", bold=True)
        for label, value in content.narrative:
            self._add_paragraph(document, f"{label}: {value}")

    def _save(self, document) -> bytes:
        output_buffer = io.BytesIO()
        document.save(output_buffer)
        return output_buffer.getvalue()

    def generate_report_bytes(self, report: Report, teacher: Teacher) -> bytes:
        """
        Generate a Word document for one report.

        Args:
            report: The evaluation to render.
            teacher: The teacher the report belongs to.

        Returns:
            Bytes of the generated .docx file
        """
        document = Document()
        self.write_report(document, build_report_content(report, teacher))
        logger.info(f"Generated Word report {report.id} for {teacher.name}")
        return self._save(document)

    def generate_aggregated_bytes(self, pairs: Sequence[Tuple[Report, Teacher]]) -> bytes:
        """
        Generate one Word document holding every (report, teacher) pair.

        Args:
            pairs: Reports with their resolved teachers, in output order.

        Returns:
            Bytes of the generated .docx file
        """
        document = Document()
        contents: List[ReportContent] = [build_report_content(report, teacher) for report, teacher in pairs]
        for index, content in enumerate(contents):
            if index > 0:
                document.add_page_break()
            self.write_report(document, content)
        logger.info(f"Generated aggregated Word document with {len(contents)} report(s)")
        return self._save(document)
