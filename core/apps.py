import atexit

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'

    pdf_service = None

    def ready(self):
        """Build the marksheet PDF service; its renderer starts lazily on first use."""
        from core.printing.service import MarksheetPdfService

        self.pdf_service = MarksheetPdfService.from_settings()
        atexit.register(self.pdf_service.close)
