"""
Core Printing Framework

Renders marksheets to PDF through interchangeable strategies: direct
ReportLab canvas layout, or HTML rendered by headless Chromium (Playwright)
or WeasyPrint. Rendered documents are cached per marksheet.
"""

from .service import MarksheetPdfService, build_renderer
from .cache import PdfRenderCache
from .dto import PdfResult, MarksheetData, SignatureSet, SubjectRow
from .interfaces import IMarksheetRenderer, IPdfRenderer

__all__ = [
    'MarksheetPdfService',
    'build_renderer',
    'PdfRenderCache',
    'PdfResult',
    'MarksheetData',
    'SignatureSet',
    'SubjectRow',
    'IMarksheetRenderer',
    'IPdfRenderer',
]
