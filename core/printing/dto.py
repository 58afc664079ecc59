"""
Data Transfer Objects for the Printing Framework
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


def format_mark(value) -> str:
    """Render a mark without trailing zeros (``87.00`` -> ``87``, ``87.50`` -> ``87.5``)."""
    if value is None or value == '':
        return ''
    mark = Decimal(str(value))
    if mark == mark.to_integral_value():
        return str(int(mark))
    return format(mark.normalize(), 'f')


@dataclass
class PdfResult:
    """
    Result of PDF rendering operation.

    Contains the PDF bytes and metadata for HTTP responses.
    """

    pdf_bytes: bytes
    filename: str
    content_type: str = "application/pdf"

    def __len__(self) -> int:
        """Return the size of PDF in bytes"""
        return len(self.pdf_bytes)


@dataclass(frozen=True)
class SubjectRow:
    """One line of the results table."""

    subject_name: str
    mark: str
    grade: str


@dataclass(frozen=True)
class MarksheetData:
    """
    Read-only snapshot of a marksheet handed to the renderers.

    Renderers never touch the ORM; views and the service build this from a
    ``Marksheet`` instance with ``from_model``.
    """

    marksheet_id: str
    reg_number: str
    student_name: str
    department: str
    year: str
    semester: str = ''
    examination_name: str = ''
    examination_date: Optional[date] = None
    overall_grade: str = ''
    subjects: tuple = ()

    @classmethod
    def from_model(cls, marksheet) -> 'MarksheetData':
        subjects = tuple(
            SubjectRow(
                subject_name=subject.subject_name,
                mark=format_mark(subject.marks),
                grade=subject.grade or '',
            )
            for subject in marksheet.subjects.all()
        )
        return cls(
            marksheet_id=marksheet.marksheet_id,
            reg_number=marksheet.reg_number,
            student_name=marksheet.student_name,
            department=marksheet.department,
            year=marksheet.year,
            semester=marksheet.semester or '',
            examination_name=marksheet.examination_name or '',
            examination_date=marksheet.examination_date,
            overall_grade=marksheet.overall_grade or '',
            subjects=subjects,
        )


@dataclass(frozen=True)
class SignatureSet:
    """
    Signature images for the three signature slots.

    Each value is a data URI, a bare base64 payload, a URL or None.
    """

    staff: Optional[str] = None
    hod: Optional[str] = None
    principal: Optional[str] = None

    def as_slots(self) -> tuple:
        """Signature values in slot order: staff, HOD, principal."""
        return (self.staff, self.hod, self.principal)
