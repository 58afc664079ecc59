"""
Tests for Core Printing Framework

Tests the printing framework components:
- Marksheet PDF service (signatures, filenames, caching)
- Renderer selection from settings
- Layout configuration and department/exam formatting
- Marksheet snapshots built from models
"""

from datetime import date
from decimal import Decimal
from unittest.mock import Mock

from django.apps import apps
from django.test import TestCase, override_settings

from core.models import Marksheet, SubjectResult, User, UserRole
from core.printing import (
    IMarksheetRenderer,
    MarksheetData,
    MarksheetPdfService,
    PdfRenderCache,
    PdfResult,
    SignatureSet,
    build_renderer,
)
from core.printing.config import (
    MarksheetLayout,
    build_exam_title,
    expand_department_name,
    format_year_semester,
)
from core.printing.dto import format_mark
from core.printing.html_renderer import HtmlMarksheetRenderer
from core.printing.playwright_renderer import PlaywrightRenderer
from core.printing.reportlab_renderer import ReportLabMarksheetRenderer
from core.printing.weasyprint_renderer import WeasyPrintRenderer


def create_marksheet(staff=None, hod=None, **overrides):
    values = dict(
        marksheet_id='MS-2025-100',
        reg_number='311521205100',
        student_name='Meena Lakshmi',
        department='IT',
        year='III',
        semester='6',
        examination_name='End Semester Examinations',
        examination_date=date(2025, 5, 10),
        overall_grade='A',
        staff=staff,
        hod=hod,
    )
    values.update(overrides)
    return Marksheet.objects.create(**values)


class MarksheetPdfServiceTestCase(TestCase):
    """Test cases for MarksheetPdfService"""

    def setUp(self):
        self.staff = User.objects.create_user(
            username='staff', email='staff@college.edu', password='pw', name='Staff',
            role=UserRole.STAFF, e_signature='data:image/png;base64,AAAA',
        )
        self.hod = User.objects.create_user(
            username='hod', email='hod@college.edu', password='pw', name='HOD',
            role=UserRole.HOD, e_signature='',
        )
        self.marksheet = create_marksheet(staff=self.staff, hod=self.hod)

        self.renderer = Mock(spec=IMarksheetRenderer)
        self.renderer.render.return_value = b'%PDF-1.4 mock'
        self.service = MarksheetPdfService(
            renderer=self.renderer,
            principal_signature='https://cdn.example.edu/principal.png',
        )

    def test_collect_signatures(self):
        signatures = self.service.collect_signatures(self.marksheet)

        self.assertEqual(signatures.staff, 'data:image/png;base64,AAAA')
        self.assertIsNone(signatures.hod)
        self.assertEqual(signatures.principal, 'https://cdn.example.edu/principal.png')

    def test_collect_signatures_without_users(self):
        marksheet = create_marksheet(marksheet_id='MS-2025-101')
        service = MarksheetPdfService(renderer=self.renderer)

        self.assertEqual(service.collect_signatures(marksheet), SignatureSet(None, None, None))

    def test_build_filename(self):
        self.assertEqual(
            MarksheetPdfService.build_filename(self.marksheet),
            'marksheet_311521205100_MS-2025-100.pdf',
        )

    def test_render_returns_pdf_result(self):
        result = self.service.render(self.marksheet)

        self.assertIsInstance(result, PdfResult)
        self.assertEqual(result.pdf_bytes, b'%PDF-1.4 mock')
        self.assertEqual(result.content_type, 'application/pdf')
        self.assertEqual(len(result), len(b'%PDF-1.4 mock'))

        data, signatures = self.renderer.render.call_args.args
        self.assertIsInstance(data, MarksheetData)
        self.assertEqual(data.reg_number, '311521205100')
        self.assertEqual(signatures.staff, 'data:image/png;base64,AAAA')

    def test_render_does_not_cache(self):
        self.service.render(self.marksheet)
        self.assertEqual(len(self.service.cache), 0)

    def test_get_or_render_caches_by_marksheet(self):
        first, first_hit = self.service.get_or_render(self.marksheet)
        second, second_hit = self.service.get_or_render(self.marksheet)

        self.assertFalse(first_hit)
        self.assertTrue(second_hit)
        self.assertEqual(first.pdf_bytes, second.pdf_bytes)
        self.assertEqual(second.filename, 'marksheet_311521205100_MS-2025-100.pdf')
        self.renderer.render.assert_called_once()
        self.assertIn(f'pdf_{self.marksheet.pk}', self.service.cache)

    def test_render_failure_is_not_cached(self):
        self.renderer.render.side_effect = RuntimeError('boom')

        with self.assertRaises(RuntimeError):
            self.service.get_or_render(self.marksheet)
        self.assertEqual(len(self.service.cache), 0)

    def test_close_releases_renderer_and_clears_cache(self):
        self.service.get_or_render(self.marksheet)
        self.service.close()

        self.renderer.close.assert_called_once()
        self.assertEqual(len(self.service.cache), 0)

    def test_app_config_holds_service(self):
        self.assertIsInstance(apps.get_app_config('core').pdf_service, MarksheetPdfService)


class BuildRendererTestCase(TestCase):
    """Test cases for renderer selection"""

    def test_reportlab_backend(self):
        self.assertIsInstance(build_renderer('reportlab'), ReportLabMarksheetRenderer)

    def test_playwright_backend_does_not_launch_browser(self):
        renderer = build_renderer('playwright')

        self.assertIsInstance(renderer, HtmlMarksheetRenderer)
        self.assertIsInstance(renderer.engine, PlaywrightRenderer)
        self.assertFalse(renderer.engine.browser_manager.is_running)

    @override_settings(MARKSHEET_BROWSER_EXECUTABLE_PATH='/opt/chrome/chrome',
                       MARKSHEET_PDF_CONTENT_TIMEOUT_MS=1234)
    def test_playwright_backend_settings(self):
        engine = build_renderer('playwright').engine

        self.assertEqual(engine.browser_manager.resolve_executable_path(), '/opt/chrome/chrome')
        self.assertEqual(engine.content_timeout_ms, 1234)

    @override_settings(MARKSHEET_LAYOUT={'html_page_margin': '20mm'})
    def test_playwright_margin_follows_layout(self):
        """Test that the browser's PDF margin honours the configured page margin"""
        engine = build_renderer('playwright').engine

        self.assertEqual(engine.margin, {'top': '20mm', 'right': '20mm',
                                         'bottom': '20mm', 'left': '20mm'})

    def test_playwright_default_margin(self):
        engine = build_renderer('playwright').engine
        self.assertEqual(engine.margin['left'], MarksheetLayout().html_page_margin)

    def test_weasyprint_backend(self):
        renderer = build_renderer('weasyprint')

        self.assertIsInstance(renderer, HtmlMarksheetRenderer)
        self.assertIsInstance(renderer.engine, WeasyPrintRenderer)

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            build_renderer('wkhtmltopdf')

    @override_settings(MARKSHEET_PDF_BACKEND='reportlab',
                       MARKSHEET_PDF_CACHE_MAX_ENTRIES=5,
                       MARKSHEET_PDF_CACHE_TTL=60,
                       MARKSHEET_PRINCIPAL_SIGNATURE_URL='https://cdn.example.edu/p.png')
    def test_service_from_settings(self):
        service = MarksheetPdfService.from_settings()

        self.assertIsInstance(service.renderer, ReportLabMarksheetRenderer)
        self.assertIsInstance(service.cache, PdfRenderCache)
        self.assertEqual(service.cache.max_entries, 5)
        self.assertEqual(service.cache.ttl_seconds, 60)
        self.assertEqual(service.principal_signature, 'https://cdn.example.edu/p.png')


class MarksheetLayoutTestCase(TestCase):
    """Test cases for layout configuration and formatting helpers"""

    def test_defaults(self):
        layout = MarksheetLayout()

        self.assertEqual(layout.margin, 40)
        self.assertEqual(layout.html_min_table_rows, 10)
        self.assertEqual(layout.default_exam_name, 'END SEMESTER EXAMINATIONS')

    @override_settings(MARKSHEET_LAYOUT={'institution_name': 'TEST INSTITUTE', 'margin': 30})
    def test_from_settings_overrides(self):
        layout = MarksheetLayout.from_settings()

        self.assertEqual(layout.institution_name, 'TEST INSTITUTE')
        self.assertEqual(layout.margin, 30)
        self.assertEqual(layout.min_row_height, 20)

    @override_settings(MARKSHEET_LAYOUT={'page_colour': 'red'})
    def test_from_settings_rejects_unknown_keys(self):
        with self.assertRaises(ValueError):
            MarksheetLayout.from_settings()

    def test_expand_department_name(self):
        self.assertEqual(expand_department_name('CSE'), 'Computer Science and Engineering')
        self.assertEqual(expand_department_name('MECH'), 'Mechanical Engineering')
        self.assertEqual(expand_department_name('CSBS'), 'CSBS')
        self.assertEqual(expand_department_name('CSE', {}), 'CSE')

    def test_build_exam_title(self):
        self.assertEqual(build_exam_title('Model Exams', date(2024, 2, 1)), 'MODEL EXAMS - FEBRUARY - 2024')
        self.assertEqual(build_exam_title('', None), 'END SEMESTER EXAMINATIONS')
        self.assertEqual(build_exam_title(None, date(2025, 11, 3)),
                         'END SEMESTER EXAMINATIONS - NOVEMBER - 2025')

    def test_format_year_semester(self):
        self.assertEqual(format_year_semester('II', '3'), 'II/3')
        self.assertEqual(format_year_semester('II', ''), 'II')
        self.assertEqual(format_year_semester('II', None), 'II')


class MarksheetDataTestCase(TestCase):
    """Test cases for marksheet snapshots"""

    def test_format_mark(self):
        self.assertEqual(format_mark(Decimal('87.00')), '87')
        self.assertEqual(format_mark(Decimal('87.50')), '87.5')
        self.assertEqual(format_mark(None), '')
        self.assertEqual(format_mark(100), '100')

    def test_from_model_orders_subjects_by_position(self):
        marksheet = create_marksheet(semester='', examination_date=None)
        SubjectResult.objects.create(marksheet=marksheet, position=2, subject_name='Second',
                                     marks=Decimal('70.00'), grade='B')
        SubjectResult.objects.create(marksheet=marksheet, position=1, subject_name='First',
                                     marks=Decimal('92.25'), grade='O')
        SubjectResult.objects.create(marksheet=marksheet, position=3, subject_name='Absent',
                                     marks=None, grade='')

        data = MarksheetData.from_model(marksheet)

        self.assertEqual([s.subject_name for s in data.subjects], ['First', 'Second', 'Absent'])
        self.assertEqual([s.mark for s in data.subjects], ['92.25', '70', ''])
        self.assertEqual(data.semester, '')
        self.assertIsNone(data.examination_date)
        self.assertEqual(data.marksheet_id, 'MS-2025-100')
