"""
Django management command to render a marksheet PDF to a file.

Useful for checking layout changes and the configured rendering backend
without going through the HTTP API.
"""

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.models import Marksheet
from core.printing.cache import PdfRenderCache
from core.printing.service import BACKENDS, MarksheetPdfService, build_renderer


class Command(BaseCommand):
    help = 'Render a marksheet to a PDF file'

    def add_arguments(self, parser):
        parser.add_argument('marksheet_pk', type=int, help='Primary key of the marksheet')
        parser.add_argument(
            '--output', '-o',
            help='Output file path (defaults to the download filename in the current directory)'
        )
        parser.add_argument(
            '--backend',
            choices=BACKENDS,
            help='Rendering backend (defaults to MARKSHEET_PDF_BACKEND)'
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            marksheet = (
                Marksheet.objects
                .select_related('staff', 'hod')
                .prefetch_related('subjects')
                .get(pk=options['marksheet_pk'])
            )
        except Marksheet.DoesNotExist:
            raise CommandError(f"Marksheet {options['marksheet_pk']} does not exist")

        if options['backend']:
            service = MarksheetPdfService(
                renderer=build_renderer(options['backend']),
                cache=PdfRenderCache(),
                principal_signature=getattr(settings, 'MARKSHEET_PRINCIPAL_SIGNATURE_URL', None),
            )
        else:
            service = MarksheetPdfService.from_settings()

        try:
            result = service.render(marksheet)
        except Exception as e:
            raise CommandError(f"Failed to render marksheet {marksheet.marksheet_id}: {e}")
        finally:
            service.close()

        output = Path(options['output'] or result.filename)
        output.write_bytes(result.pdf_bytes)

        self.stdout.write(
            self.style.SUCCESS(f"Wrote {len(result)} bytes to {output}")
        )
