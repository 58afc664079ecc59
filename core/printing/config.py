"""
Layout configuration for marksheet documents.

All literals used by the renderers (institution header, margins, column
widths, font sizes, the department abbreviation table) live here so the
layout code never has to be touched to change them.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Optional

from django.conf import settings


DEPARTMENT_NAMES = {
    'AI_DS': 'Artificial Intelligence and Data Science',
    'CSE': 'Computer Science and Engineering',
    'IT': 'Information Technology',
    'ECE': 'Electronics and Communication Engineering',
    'EEE': 'Electrical and Electronics Engineering',
    'MECH': 'Mechanical Engineering',
    'CIVIL': 'Civil Engineering',
}

DEFAULT_EXAM_NAME = 'END SEMESTER EXAMINATIONS'


@dataclass(frozen=True)
class MarksheetLayout:
    """Fixed layout values shared by the ReportLab and HTML renderers."""

    # Institution header
    institution_name: str = 'MEENAKSHI SUNDARARAJAN ENGINEERING COLLEGE'
    affiliation: str = '(AN AUTONOMOUS INSTITUTION AFFILIATED TO ANNA UNIVERSITY.)'
    address: str = '363, ARCOT ROAD, KODAMBAKKAM, CHENNAI-600024'
    office: str = 'OFFICE OF THE CONTROLLER OF EXAMINATIONS'
    default_exam_name: str = DEFAULT_EXAM_NAME
    degree_prefix: str = 'B.Tech'
    department_names: dict = field(default_factory=lambda: dict(DEPARTMENT_NAMES))

    # Page (points)
    margin: float = 40
    logo_width: float = 75
    logo_height: float = 75
    header_gap: float = 18
    header_rule_offset: float = 6
    header_rule_width: float = 0.75
    header_bottom_spacing: float = 16

    # Student info block
    info_label_width: float = 140
    info_value_gap: float = 6
    info_font_size: float = 11
    info_line_gap: float = 6

    # Results table
    table_top_gap: float = 10
    footer_reserve: float = 140
    min_table_height: float = 120
    min_row_height: float = 20
    min_row_font_size: float = 9
    max_row_font_size: float = 12
    cell_padding_x: float = 6
    cell_padding_y: float = 4
    serial_column_width: float = 45
    mark_column_width: float = 70
    grade_column_width: float = 60

    # Summary, signatures and footer
    summary_gap: float = 6
    summary_font_size: float = 11
    signature_offset: float = 60
    signature_image_height: float = 40
    signature_slot_padding: float = 10
    signature_font_size: float = 9
    footer_offset: float = 20
    footer_font_size: float = 8
    footer_color: str = '#555555'

    # HTML variant
    html_min_table_rows: int = 10
    html_page_margin: str = '12mm'

    @classmethod
    def from_settings(cls) -> 'MarksheetLayout':
        """Build the layout, applying overrides from ``settings.MARKSHEET_LAYOUT``."""
        overrides = getattr(settings, 'MARKSHEET_LAYOUT', None) or {}
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown MARKSHEET_LAYOUT keys: {', '.join(sorted(unknown))}")
        return replace(cls(), **overrides)

    @property
    def signature_labels(self) -> tuple:
        return ('Signature of Staff', 'Signature of HOD', 'Signature of Principal')


def expand_department_name(code: str, table: Optional[dict] = None) -> str:
    """
    Expand a department abbreviation to its full name.

    Unknown codes are returned unchanged.
    """
    table = DEPARTMENT_NAMES if table is None else table
    return table.get(code, code)


def build_exam_title(name: Optional[str], exam_date: Optional[date],
                     default: str = DEFAULT_EXAM_NAME) -> str:
    """
    Build the exam line of the header, e.g. ``END SEMESTER EXAMINATIONS - NOVEMBER - 2025``.
    """
    title = (name or default).upper()
    if exam_date is None:
        return title
    return f"{title} - {exam_date.strftime('%B').upper()} - {exam_date.year}"


def format_year_semester(year: str, semester: Optional[str]) -> str:
    return f"{year}/{semester}" if semester else f"{year}"
