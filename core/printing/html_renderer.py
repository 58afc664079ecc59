"""
HTML Marksheet Renderer

Renders the marksheet Django template to HTML and delegates the PDF
conversion to an HTML engine (Playwright or WeasyPrint).
"""

import base64
import logging
import mimetypes
import os
from typing import Callable, Optional

from django.template.loader import render_to_string
from django.utils import timezone

from .config import (
    MarksheetLayout,
    build_exam_title,
    expand_department_name,
    format_year_semester,
)
from .dto import MarksheetData, SignatureSet
from .interfaces import IMarksheetRenderer, IPdfRenderer
from .signatures import local_image_path


logger = logging.getLogger(__name__)

TEMPLATE_NAME = 'printing/marksheet.html'


def file_to_data_uri(path: Optional[str]) -> Optional[str]:
    """Embed a local image file as a base64 data URI; missing files yield None."""
    if not path or not os.path.isfile(path):
        return None
    mime_type = mimetypes.guess_type(path)[0] or 'image/png'
    with open(path, 'rb') as f:
        encoded = base64.b64encode(f.read()).decode('ascii')
    return f"data:{mime_type};base64,{encoded}"


def image_src(value: Optional[str]) -> Optional[str]:
    """
    Turn a stored signature value into something usable as ``<img src>``.

    URLs and data URIs pass through; local image files are embedded; bare
    base64 payloads are wrapped in a PNG data URI.
    """
    if not value:
        return None
    value = value.strip()
    if value.startswith(('http://', 'https://', 'data:', 'file://')):
        return value
    path = local_image_path(value)
    if path is not None:
        return file_to_data_uri(str(path))
    return f"data:image/png;base64,{value}"


class HtmlMarksheetRenderer(IMarksheetRenderer):
    """
    Marksheet renderer going through HTML.

    Short marksheets are padded with empty rows so the results table always
    has at least ``layout.html_min_table_rows`` rows.
    """

    def __init__(
        self,
        engine: IPdfRenderer,
        layout: Optional[MarksheetLayout] = None,
        logo_path: Optional[str] = None,
        base_url: str = '',
        now: Optional[Callable] = None,
    ):
        """
        Initialize the renderer.

        Args:
            engine: HTML to PDF engine
            layout: Layout configuration (defaults to MarksheetLayout())
            logo_path: Path to the institution logo, embedded as base64
            base_url: Base URL for resolving relative URLs in the HTML
            now: Callable returning the generation timestamp (for tests)
        """
        self.engine = engine
        self.layout = layout or MarksheetLayout()
        self.logo_path = logo_path
        self.base_url = base_url
        self._now = now or timezone.localtime

    def build_context(self, marksheet: MarksheetData, signatures: SignatureSet) -> dict:
        layout = self.layout
        subjects = list(marksheet.subjects)
        min_rows = max(layout.html_min_table_rows, len(subjects))
        rows = subjects + [None] * (min_rows - len(subjects))

        department = expand_department_name(marksheet.department, layout.department_names)

        return {
            'marksheet': marksheet,
            'layout': layout,
            'logo_data_uri': file_to_data_uri(self.logo_path),
            'exam_title': build_exam_title(
                marksheet.examination_name,
                marksheet.examination_date,
                layout.default_exam_name,
            ),
            'info_rows': [
                ('Register Number', marksheet.reg_number),
                ('Student Name', marksheet.student_name),
                ('Department', f"{layout.degree_prefix} {department}"),
                ('Year/Semester', format_year_semester(marksheet.year, marksheet.semester)),
            ],
            'rows': rows,
            'subject_count': len(subjects),
            'signature_slots': [
                {'label': label, 'image': image_src(value)}
                for label, value in zip(layout.signature_labels, signatures.as_slots())
            ],
            'generated_at': self._now().strftime('%d/%m/%Y, %I:%M:%S %p'),
        }

    def render_html(self, marksheet: MarksheetData, signatures: SignatureSet) -> str:
        return render_to_string(TEMPLATE_NAME, self.build_context(marksheet, signatures))

    def render(self, marksheet: MarksheetData, signatures: SignatureSet) -> bytes:
        """
        Render a marksheet to PDF via HTML.

        Raises:
            Exception: If template rendering or PDF conversion fails
        """
        logger.debug(f"Rendering marksheet {marksheet.marksheet_id} with {type(self.engine).__name__}")
        html = self.render_html(marksheet, signatures)
        return self.engine.render_html_to_pdf(html, self.base_url)

    def close(self) -> None:
        self.engine.close()
