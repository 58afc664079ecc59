"""
WeasyPrint Renderer Implementation

Adapter for rendering HTML to PDF using WeasyPrint engine.
"""

from typing import Optional
import logging

from .interfaces import IPdfRenderer


logger = logging.getLogger(__name__)


class WeasyPrintRenderer(IPdfRenderer):
    """
    PDF renderer using WeasyPrint engine.

    Supports:
    - Print CSS with paged media (@page size and margins)
    - Inline base64 images
    - Additional stylesheets (if configured)

    WeasyPrint is imported on first render because it loads Pango through
    cffi at import time.
    """

    def __init__(self, stylesheets: Optional[list] = None):
        """
        Initialize the renderer.

        Args:
            stylesheets: Optional list of CSS file paths to include
        """
        self.stylesheets = stylesheets or []

    def render_html_to_pdf(self, html: str, base_url: str) -> bytes:
        """
        Render HTML to PDF using WeasyPrint.

        Args:
            html: HTML string to render
            base_url: Base URL for resolving relative URLs (e.g., for images, CSS)

        Returns:
            PDF content as bytes

        Raises:
            Exception: If rendering fails
        """
        from weasyprint import HTML, CSS

        try:
            html_doc = HTML(string=html, base_url=base_url or None)
            css_list = [CSS(filename=css) for css in self.stylesheets]
            pdf_bytes = html_doc.write_pdf(stylesheets=css_list)

            logger.info(f"Successfully rendered PDF: {len(pdf_bytes)} bytes")
            return pdf_bytes

        except Exception as e:
            logger.error(f"Failed to render PDF: {e}", exc_info=True)
            raise
