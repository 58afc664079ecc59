"""
Service-layer exceptions for consistent error handling across the portal.

Views map these onto HTTP status codes; render failures become 500 responses
with the exception message attached as detail.
"""


class ServiceError(Exception):
    """Base exception for all service-related errors."""
    pass


class MarksheetRenderError(ServiceError):
    """
    Raised when a marksheet cannot be turned into a PDF.

    Example:
        The headless browser fails while loading the HTML or capturing the
        print output.
    """
    pass


class BrowserUnavailable(MarksheetRenderError):
    """
    Raised when the headless browser cannot be launched.

    Example:
        No Chromium executable was found and Playwright's bundled browser is
        not installed.
    """
    pass
