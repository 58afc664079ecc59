"""
ReportLab Renderer Implementation

Draws marksheets directly on a ReportLab canvas: institution header,
student details, boxed results table, summary line, signature slots and a
generation footer.

Layout positions are tracked as distances from the top of the page, the
way the document is read, and converted to ReportLab's bottom-left origin
only when drawing.
"""

import logging
import math
import os
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, List, Optional
from xml.sax.saxutils import escape

from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.platypus import Paragraph

from .config import (
    MarksheetLayout,
    build_exam_title,
    expand_department_name,
    format_year_semester,
)
from .dto import MarksheetData, SignatureSet
from .interfaces import IMarksheetRenderer
from .signatures import DEFAULT_FETCH_TIMEOUT, image_reader, load_signature_image


logger = logging.getLogger(__name__)

FONT_REGULAR = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
LEADING_FACTOR = 1.2
UNBOUNDED_HEIGHT = 10 ** 6


@dataclass
class TableColumn:
    key: str
    label: str
    width: float
    x: float
    align: int = TA_LEFT


@dataclass
class TableRow:
    values: dict
    height: float
    header: bool = False


@dataclass
class TablePlan:
    """Measured results table: columns, rows (header first) and sizing."""

    columns: List[TableColumn]
    rows: List[TableRow]
    base_row_height: float
    font_size: float

    @property
    def header(self) -> TableRow:
        return self.rows[0]

    @property
    def body(self) -> List[TableRow]:
        return self.rows[1:]


class ReportLabMarksheetRenderer(IMarksheetRenderer):
    """
    Marksheet renderer drawing on a ReportLab canvas.

    Supports:
    - Wrapped course names with per-row height measurement
    - Table continuation on new pages with a repeated header row
    - Signature images from data URIs, base64 payloads or URLs
    """

    def __init__(
        self,
        layout: Optional[MarksheetLayout] = None,
        logo_path: Optional[str] = None,
        signature_timeout: float = DEFAULT_FETCH_TIMEOUT,
        now: Optional[Callable] = None,
    ):
        """
        Initialize the renderer.

        Args:
            layout: Layout configuration (defaults to MarksheetLayout())
            logo_path: Path to the institution logo; missing files are skipped
            signature_timeout: Timeout in seconds for signature URL fetches
            now: Callable returning the generation timestamp (for tests)
        """
        self.layout = layout or MarksheetLayout()
        self.logo_path = logo_path
        self.signature_timeout = signature_timeout
        self._now = now or timezone.localtime
        self.page_width, self.page_height = A4

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.layout.margin

    def render(self, marksheet: MarksheetData, signatures: SignatureSet) -> bytes:
        """
        Render a marksheet to PDF bytes.

        Args:
            marksheet: Marksheet snapshot
            signatures: Signature images for the three slots

        Returns:
            PDF content as bytes
        """
        buffer = BytesIO()
        c = pdf_canvas.Canvas(buffer, pagesize=A4)
        c.setTitle(f"Marksheet {marksheet.marksheet_id}")
        c.setAuthor(self.layout.institution_name)

        top = self._draw_header(c, marksheet)
        top = self._draw_student_info(c, marksheet, top)

        table_top = top + self.layout.info_font_size / 2 + self.layout.table_top_gap
        plan = self.plan_table(marksheet.subjects, table_top)
        table_bottom = self._draw_table(c, plan, table_top)

        self._draw_summary(c, marksheet, table_bottom + self.layout.summary_gap)
        self._draw_signatures(c, signatures)
        self._draw_footer(c)

        c.showPage()
        c.save()

        pdf_bytes = buffer.getvalue()
        buffer.close()
        return pdf_bytes

    # Measurement helpers

    def _baseline(self, top: float, font_size: float) -> float:
        return self.page_height - top - font_size

    def _paragraph(self, text, font_name: str, font_size: float,
                   alignment: int = TA_LEFT) -> Paragraph:
        style = ParagraphStyle(
            f'{font_name}-{font_size}-{alignment}',
            fontName=font_name,
            fontSize=font_size,
            leading=font_size * LEADING_FACTOR,
            alignment=alignment,
        )
        return Paragraph(escape(f"{text if text is not None else ''}"), style)

    def measure_text(self, text, width: float, font_name: str = FONT_REGULAR,
                     font_size: float = 11, alignment: int = TA_LEFT) -> float:
        """Height of ``text`` wrapped to ``width`` at the given font."""
        paragraph = self._paragraph(text, font_name, font_size, alignment)
        _, height = paragraph.wrap(width, UNBOUNDED_HEIGHT)
        return height

    def _draw_text(self, c, text, x: float, top: float, width: float,
                   font_name: str, font_size: float, alignment: int = TA_LEFT) -> float:
        paragraph = self._paragraph(text, font_name, font_size, alignment)
        _, height = paragraph.wrap(width, UNBOUNDED_HEIGHT)
        paragraph.drawOn(c, x, self.page_height - top - height)
        return height

    # Header

    def header_lines(self, marksheet: MarksheetData) -> list:
        """Header text lines as (text, font size, font name, spacing after)."""
        layout = self.layout
        exam_title = build_exam_title(
            marksheet.examination_name,
            marksheet.examination_date,
            layout.default_exam_name,
        )
        return [
            (layout.institution_name, 16, FONT_BOLD, 4),
            (layout.affiliation, 10, FONT_REGULAR, 2),
            (layout.address, 10, FONT_REGULAR, 4),
            (layout.office, 12, FONT_BOLD, 4),
            (exam_title, 10, FONT_BOLD, 0),
        ]

    def _draw_header(self, c, marksheet: MarksheetData) -> float:
        layout = self.layout
        header_top = layout.margin
        text_x = layout.margin + layout.logo_width + layout.header_gap
        text_width = self.content_width - layout.logo_width - layout.header_gap

        if self.logo_path and os.path.isfile(self.logo_path):
            try:
                c.drawImage(
                    self.logo_path,
                    layout.margin,
                    self.page_height - (header_top + 2) - layout.logo_height,
                    width=layout.logo_width,
                    height=layout.logo_height,
                    preserveAspectRatio=True,
                    mask='auto',
                )
            except Exception as e:
                logger.warning(f"Failed to draw logo {self.logo_path}: {e}")

        cursor = header_top
        for text, font_size, font_name, spacing in self.header_lines(marksheet):
            height = self._draw_text(c, text, text_x, cursor, text_width,
                                     font_name, font_size, TA_CENTER)
            cursor += height + spacing

        # The logo box reserves its height even when no logo is drawn
        header_bottom = max(cursor, header_top + layout.logo_height)

        rule_y = self.page_height - (header_bottom + layout.header_rule_offset)
        c.saveState()
        c.setLineWidth(layout.header_rule_width)
        c.line(layout.margin, rule_y, self.page_width - layout.margin, rule_y)
        c.restoreState()

        return header_bottom + layout.header_bottom_spacing

    # Student info

    def info_rows(self, marksheet: MarksheetData) -> list:
        """Label/value pairs of the student info block."""
        department = expand_department_name(marksheet.department, self.layout.department_names)
        return [
            ('Register Number', marksheet.reg_number),
            ('Student Name', marksheet.student_name),
            ('Department', f"{self.layout.degree_prefix} {department}"),
            ('Year/Semester', format_year_semester(marksheet.year, marksheet.semester)),
        ]

    def _draw_student_info(self, c, marksheet: MarksheetData, top: float) -> float:
        layout = self.layout
        label_width = layout.info_label_width
        value_x = layout.margin + label_width + layout.info_value_gap
        value_width = self.content_width - label_width - layout.info_value_gap

        for label, value in self.info_rows(marksheet):
            label_height = self._draw_text(c, f"{label}:", layout.margin, top, label_width,
                                           FONT_BOLD, layout.info_font_size)
            value_height = self._draw_text(c, value, value_x, top, value_width,
                                           FONT_REGULAR, layout.info_font_size)
            top += max(label_height, value_height) + layout.info_line_gap

        return top

    # Results table

    def _columns(self) -> List[TableColumn]:
        layout = self.layout
        fixed = layout.serial_column_width + layout.mark_column_width + layout.grade_column_width
        specs = [
            ('sno', 'S.No', layout.serial_column_width, TA_CENTER),
            ('course', 'Course', self.content_width - fixed, TA_LEFT),
            ('mark', 'Mark', layout.mark_column_width, TA_CENTER),
            ('grade', 'Grade', layout.grade_column_width, TA_CENTER),
        ]
        columns = []
        x = layout.margin
        for key, label, width, align in specs:
            columns.append(TableColumn(key=key, label=label, width=width, x=x, align=align))
            x += width
        return columns

    def _table_limit(self) -> float:
        """Lowest point (from the top) a table row may reach on a page."""
        return self.page_height - self.layout.margin - self.layout.footer_reserve

    def plan_table(self, subjects, table_top: float) -> TablePlan:
        """
        Measure the results table.

        The base row height spreads the rows over the space left above the
        signature block; a row grows beyond it when a wrapped cell needs
        more room. With no subjects the table consists of the header row only.

        Args:
            subjects: Sequence of SubjectRow
            table_top: Distance of the table top from the page top

        Returns:
            TablePlan with the header row first
        """
        layout = self.layout
        rows_count = len(subjects) or 1
        max_table_height = max(layout.min_table_height, self._table_limit() - table_top)
        base_row_height = max(
            layout.min_row_height,
            math.floor(max_table_height / (rows_count + 1)) or layout.min_row_height,
        )
        font_size = max(layout.min_row_font_size,
                        min(layout.max_row_font_size, base_row_height - 6))
        columns = self._columns()

        header_height = max(base_row_height, font_size + layout.cell_padding_y * 2 + 2)
        rows = [TableRow(
            values={col.key: col.label for col in columns},
            height=header_height,
            header=True,
        )]

        for index, subject in enumerate(subjects, start=1):
            values = {
                'sno': str(index),
                'course': subject.subject_name,
                'mark': subject.mark,
                'grade': subject.grade,
            }
            tallest = max(
                self.measure_text(values[col.key], col.width - layout.cell_padding_x * 2,
                                  FONT_REGULAR, font_size, col.align)
                for col in columns
            )
            rows.append(TableRow(
                values=values,
                height=max(base_row_height, tallest + layout.cell_padding_y * 2),
            ))

        return TablePlan(columns=columns, rows=rows,
                         base_row_height=base_row_height, font_size=font_size)

    def paginate(self, plan: TablePlan, table_top: float) -> List[List[TableRow]]:
        """
        Split body rows into pages.

        The first page starts at ``table_top``; continuation pages start at
        the top margin below a repeated header row. A page always takes at
        least one row so oversized rows cannot stall pagination.
        """
        limit = self._table_limit()
        pages: List[List[TableRow]] = [[]]
        top = table_top + plan.header.height

        for row in plan.body:
            if pages[-1] and top + row.height > limit:
                pages.append([])
                top = self.layout.margin + plan.header.height
            pages[-1].append(row)
            top += row.height

        return pages

    def _draw_row(self, c, plan: TablePlan, row: TableRow, top: float) -> None:
        layout = self.layout
        bottom_y = self.page_height - top - row.height
        font_name = FONT_BOLD if row.header else FONT_REGULAR

        c.rect(layout.margin, bottom_y, self.content_width, row.height, stroke=1, fill=0)
        for col in plan.columns:
            self._draw_text(
                c,
                row.values.get(col.key, ''),
                col.x + layout.cell_padding_x,
                top + layout.cell_padding_y,
                col.width - layout.cell_padding_x * 2,
                font_name,
                plan.font_size,
                col.align,
            )
            right = col.x + col.width
            c.line(right, self.page_height - top, right, bottom_y)

    def _draw_table(self, c, plan: TablePlan, table_top: float) -> float:
        top = table_top
        for page_number, rows in enumerate(self.paginate(plan, table_top)):
            if page_number > 0:
                c.showPage()
                top = self.layout.margin
            self._draw_row(c, plan, plan.header, top)
            top += plan.header.height
            for row in rows:
                self._draw_row(c, plan, row, top)
                top += row.height
        return top

    # Summary, signatures, footer

    def _draw_summary(self, c, marksheet: MarksheetData, top: float) -> None:
        layout = self.layout
        baseline = self._baseline(top, layout.summary_font_size)

        c.setFont(FONT_BOLD, layout.summary_font_size)
        c.drawString(layout.margin, baseline, f"Overall Grade: {marksheet.overall_grade or '-'}")
        c.setFont(FONT_REGULAR, layout.summary_font_size)
        c.drawString(layout.margin + self.content_width / 2, baseline,
                     f"Total Subjects: {len(marksheet.subjects)}")

    def _draw_signatures(self, c, signatures: SignatureSet) -> None:
        layout = self.layout
        signature_top = self.page_height - layout.margin - layout.signature_offset
        slot_width = self.content_width / 3
        pad = layout.signature_slot_padding

        for index, (label, value) in enumerate(zip(layout.signature_labels, signatures.as_slots())):
            slot_x = layout.margin + index * slot_width

            reader = image_reader(load_signature_image(value, self.signature_timeout))
            if reader is not None:
                image_top = signature_top - layout.signature_image_height - 5
                try:
                    c.drawImage(
                        reader,
                        slot_x + pad,
                        self.page_height - image_top - layout.signature_image_height,
                        width=slot_width - pad * 2,
                        height=layout.signature_image_height,
                        preserveAspectRatio=True,
                        anchor='c',
                        mask='auto',
                    )
                except Exception as e:
                    logger.warning(f"Failed to draw signature for slot '{label}': {e}")

            line_y = self.page_height - signature_top
            c.line(slot_x + pad, line_y, slot_x + slot_width - pad, line_y)

            c.setFont(FONT_REGULAR, layout.signature_font_size)
            c.drawCentredString(
                slot_x + slot_width / 2,
                self._baseline(signature_top + 4, layout.signature_font_size),
                label,
            )

    def _draw_footer(self, c) -> None:
        layout = self.layout
        generated = self._now().strftime('%d/%m/%Y, %I:%M:%S %p')
        top = self.page_height - layout.margin - layout.footer_offset

        c.setFont(FONT_REGULAR, layout.footer_font_size)
        c.setFillColor(colors.HexColor(layout.footer_color))
        c.drawRightString(
            layout.margin + self.content_width,
            self._baseline(top, layout.footer_font_size),
            f"Generated on {generated}",
        )
        c.setFillColor(colors.black)
