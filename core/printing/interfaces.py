"""
Interfaces for the Printing Framework

Defines the marksheet renderer interface implemented by each rendering
strategy, and the HTML engine interface used by the HTML strategy.
"""

from abc import ABC, abstractmethod

from .dto import MarksheetData, SignatureSet


class IMarksheetRenderer(ABC):
    """
    Interface for marksheet rendering strategies.

    Implementations turn a marksheet snapshot and its signatures into PDF
    bytes. They must not depend on request or database state.
    """

    @abstractmethod
    def render(self, marksheet: MarksheetData, signatures: SignatureSet) -> bytes:
        """
        Render a marksheet to PDF.

        Args:
            marksheet: Marksheet snapshot to render
            signatures: Staff, HOD and principal signature images

        Returns:
            PDF content as bytes

        Raises:
            Exception: If rendering fails
        """
        pass

    def close(self) -> None:
        """Release long-lived resources held by the renderer (optional)."""
        pass


class IPdfRenderer(ABC):
    """
    Interface for HTML to PDF rendering engines.

    Implementations convert HTML to PDF bytes using their specific engine.
    """

    @abstractmethod
    def render_html_to_pdf(self, html: str, base_url: str) -> bytes:
        """
        Render HTML to PDF.

        Args:
            html: HTML string to render
            base_url: Base URL for resolving relative URLs (static assets, etc.)

        Returns:
            PDF content as bytes

        Raises:
            Exception: If rendering fails
        """
        pass

    def close(self) -> None:
        """Release engine resources such as browser processes (optional)."""
        pass
