"""
Marksheet PDF Service

Central service for turning marksheet records into PDF documents.
"""

from typing import Optional, Tuple
import logging

from django.conf import settings

from .cache import PdfRenderCache, DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS
from .config import MarksheetLayout
from .dto import MarksheetData, PdfResult, SignatureSet
from .interfaces import IMarksheetRenderer


logger = logging.getLogger(__name__)

BACKEND_REPORTLAB = 'reportlab'
BACKEND_PLAYWRIGHT = 'playwright'
BACKEND_WEASYPRINT = 'weasyprint'
BACKENDS = (BACKEND_REPORTLAB, BACKEND_PLAYWRIGHT, BACKEND_WEASYPRINT)


def build_renderer(backend: str, layout: Optional[MarksheetLayout] = None) -> IMarksheetRenderer:
    """
    Build the marksheet renderer for a backend name.

    Args:
        backend: One of 'reportlab', 'playwright', 'weasyprint'
        layout: Layout configuration (defaults to MarksheetLayout.from_settings())

    Returns:
        IMarksheetRenderer implementation

    Raises:
        ValueError: If the backend is unknown
    """
    layout = layout or MarksheetLayout.from_settings()
    logo_path = getattr(settings, 'MARKSHEET_LOGO_PATH', None)

    if backend == BACKEND_REPORTLAB:
        from .reportlab_renderer import ReportLabMarksheetRenderer
        return ReportLabMarksheetRenderer(
            layout=layout,
            logo_path=logo_path,
            signature_timeout=getattr(settings, 'MARKSHEET_SIGNATURE_FETCH_TIMEOUT', 10.0),
        )

    if backend == BACKEND_PLAYWRIGHT:
        from .browser import BrowserManager
        from .html_renderer import HtmlMarksheetRenderer
        from .playwright_renderer import PlaywrightRenderer, DEFAULT_CONTENT_TIMEOUT_MS, page_margin
        browser_manager = BrowserManager(
            executable_path=getattr(settings, 'MARKSHEET_BROWSER_EXECUTABLE_PATH', None),
            system_browser_path=getattr(settings, 'MARKSHEET_SYSTEM_BROWSER_PATH', None),
        )
        engine = PlaywrightRenderer(
            browser_manager=browser_manager,
            content_timeout_ms=getattr(settings, 'MARKSHEET_PDF_CONTENT_TIMEOUT_MS',
                                       DEFAULT_CONTENT_TIMEOUT_MS),
            margin=page_margin(layout.html_page_margin),
        )
        return HtmlMarksheetRenderer(engine=engine, layout=layout, logo_path=logo_path)

    if backend == BACKEND_WEASYPRINT:
        from .html_renderer import HtmlMarksheetRenderer
        from .weasyprint_renderer import WeasyPrintRenderer
        return HtmlMarksheetRenderer(engine=WeasyPrintRenderer(), layout=layout, logo_path=logo_path)

    raise ValueError(f"Unknown marksheet PDF backend '{backend}'. Expected one of: {', '.join(BACKENDS)}")


class MarksheetPdfService:
    """
    Core service for the marksheet PDF pipeline.

    Responsibilities:
    1. Collect signature images for a marksheet
    2. Look up rendered PDFs in the cache
    3. Delegate rendering to an IMarksheetRenderer on a miss
    4. Return structured PdfResult

    Usage:
        service = MarksheetPdfService.from_settings()
        result, cache_hit = service.get_or_render(marksheet)
        ...
        service.close()
    """

    def __init__(
        self,
        renderer: IMarksheetRenderer,
        cache: Optional[PdfRenderCache] = None,
        principal_signature: Optional[str] = None,
    ):
        """
        Initialize the service.

        Args:
            renderer: Marksheet renderer implementation
            cache: Render cache (a fresh default-sized cache if None)
            principal_signature: Principal signature image used for every marksheet
        """
        self.renderer = renderer
        self.cache = cache if cache is not None else PdfRenderCache()
        self.principal_signature = principal_signature

    @classmethod
    def from_settings(cls) -> 'MarksheetPdfService':
        backend = getattr(settings, 'MARKSHEET_PDF_BACKEND', BACKEND_REPORTLAB)
        cache = PdfRenderCache(
            max_entries=getattr(settings, 'MARKSHEET_PDF_CACHE_MAX_ENTRIES', DEFAULT_MAX_ENTRIES),
            ttl_seconds=getattr(settings, 'MARKSHEET_PDF_CACHE_TTL', DEFAULT_TTL_SECONDS),
        )
        return cls(
            renderer=build_renderer(backend),
            cache=cache,
            principal_signature=getattr(settings, 'MARKSHEET_PRINCIPAL_SIGNATURE_URL', None),
        )

    def collect_signatures(self, marksheet) -> SignatureSet:
        """Signature images for the staff, HOD and principal slots of a marksheet."""
        staff = marksheet.staff
        hod = marksheet.hod
        return SignatureSet(
            staff=(staff.e_signature or None) if staff else None,
            hod=(hod.e_signature or None) if hod else None,
            principal=self.principal_signature or None,
        )

    @staticmethod
    def build_filename(marksheet) -> str:
        return f"marksheet_{marksheet.reg_number}_{marksheet.marksheet_id}.pdf"

    @staticmethod
    def cache_key(marksheet) -> str:
        # Keyed by record only; signature changes within the TTL are served stale
        return PdfRenderCache.build_key(marksheet.pk)

    def render(self, marksheet) -> PdfResult:
        """
        Render a marksheet without consulting the cache.

        Args:
            marksheet: Marksheet model instance (staff/hod loaded)

        Returns:
            PdfResult with PDF bytes and filename

        Raises:
            Exception: If rendering fails
        """
        data = MarksheetData.from_model(marksheet)
        signatures = self.collect_signatures(marksheet)

        try:
            pdf_bytes = self.renderer.render(data, signatures)
        except Exception as e:
            logger.error(
                f"Failed to render PDF for marksheet {marksheet.marksheet_id}: {e}",
                exc_info=True
            )
            raise

        result = PdfResult(
            pdf_bytes=pdf_bytes,
            filename=self.build_filename(marksheet),
            content_type='application/pdf'
        )

        logger.info(
            f"Successfully generated PDF: {result.filename} "
            f"({len(result.pdf_bytes)} bytes)"
        )

        return result

    def get_or_render(self, marksheet) -> Tuple[PdfResult, bool]:
        """
        Return the cached PDF for a marksheet, rendering and caching on a miss.

        Returns:
            Tuple of (PdfResult, cache_hit)
        """
        key = self.cache_key(marksheet)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Serving cached PDF for marksheet {marksheet.marksheet_id}")
            return PdfResult(pdf_bytes=cached, filename=self.build_filename(marksheet)), True

        result = self.render(marksheet)
        self.cache.put(key, result.pdf_bytes)
        return result, False

    def close(self) -> None:
        """Release the renderer's resources and drop cached documents."""
        try:
            self.renderer.close()
        finally:
            self.cache.clear()
