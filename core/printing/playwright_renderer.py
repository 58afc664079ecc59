"""
Playwright Renderer Implementation

Adapter for rendering HTML to PDF with headless Chromium's print-to-PDF.
"""

import logging
from typing import Optional

from core.services.exceptions import MarksheetRenderError

from .browser import BrowserManager
from .interfaces import IPdfRenderer


logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TIMEOUT_MS = 30000


def page_margin(value: str) -> dict:
    """Uniform ``page.pdf`` margin from a CSS length such as ``12mm``."""
    return {side: value for side in ('top', 'right', 'bottom', 'left')}


# page.pdf margins take precedence over the template's @page margin
DEFAULT_MARGIN = page_margin('12mm')


class PlaywrightRenderer(IPdfRenderer):
    """
    PDF renderer using a shared headless Chromium.

    Each render opens a page, loads the HTML (waiting for DOM parsing only,
    not for every resource), captures an A4 PDF with background graphics and
    closes the page again, whatever the outcome.
    """

    def __init__(
        self,
        browser_manager: Optional[BrowserManager] = None,
        content_timeout_ms: int = DEFAULT_CONTENT_TIMEOUT_MS,
        margin: Optional[dict] = None,
    ):
        self.browser_manager = browser_manager or BrowserManager()
        self.content_timeout_ms = content_timeout_ms
        self.margin = margin or dict(DEFAULT_MARGIN)

    def render_html_to_pdf(self, html: str, base_url: str) -> bytes:
        """
        Render HTML to PDF in a fresh browser page.

        Args:
            html: Self-contained HTML string
            base_url: Unused; the marksheet HTML embeds its images

        Returns:
            PDF content as bytes

        Raises:
            BrowserUnavailable: If the browser cannot be launched
            MarksheetRenderError: If loading the content or capturing the PDF fails
        """
        browser = self.browser_manager.get_browser()
        page = None
        try:
            page = browser.new_page()
            page.set_content(html, wait_until='domcontentloaded', timeout=self.content_timeout_ms)
            pdf_bytes = page.pdf(format='A4', margin=self.margin, print_background=True)
        except Exception as e:
            logger.error(f"Failed to capture PDF in headless browser: {e}", exc_info=True)
            raise MarksheetRenderError(f"Failed to capture PDF: {e}") from e
        finally:
            if page is not None:
                try:
                    page.close()
                except Exception as e:
                    logger.debug(f"Ignoring error while closing page: {e}")

        logger.info(f"Successfully rendered PDF: {len(pdf_bytes)} bytes")
        return pdf_bytes

    def close(self) -> None:
        self.browser_manager.close()
