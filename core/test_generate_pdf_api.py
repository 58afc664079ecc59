"""
Tests for the marksheet PDF API endpoint.

This module tests /api/generate-pdf including:
- GET download with X-Cache HIT/MISS and cache expiry
- POST base64 export
- Error mapping (400, 404, 500, 503, 405)
"""
import base64
import json
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import Mock, patch

from django.apps import apps
from django.db import OperationalError
from django.test import TestCase, Client

from core.models import Marksheet, SubjectResult, User, UserRole
from core.printing import MarksheetPdfService, PdfRenderCache
from core.printing.reportlab_renderer import ReportLabMarksheetRenderer


PNG_1X1 = (
    'iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=='
)


class FakeClock:
    def __init__(self, now=5000.0):
        self.now = now

    def __call__(self):
        return self.now


class GeneratePdfAPITestBase(TestCase):
    """Shared fixtures: a marksheet with subjects and a service with a controllable clock."""

    def setUp(self):
        self.client = Client()
        self.staff = User.objects.create_user(
            username='staff1', email='staff1@college.edu', password='pw',
            name='Staff One', role=UserRole.STAFF,
            e_signature=f'data:image/png;base64,{PNG_1X1}',
        )
        self.hod = User.objects.create_user(
            username='hod1', email='hod1@college.edu', password='pw',
            name='HOD One', role=UserRole.HOD,
        )
        self.marksheet = Marksheet.objects.create(
            marksheet_id='MS-2025-010',
            reg_number='311521104010',
            student_name='Divya Krishnan',
            department='CSE',
            year='IV',
            semester='7',
            examination_name='End Semester Examinations',
            examination_date=date(2025, 11, 15),
            overall_grade='A+',
            staff=self.staff,
            hod=self.hod,
        )
        for position, (name, marks, grade) in enumerate([
            ('Cryptography and Network Security', Decimal('91.00'), 'O'),
            ('Machine Learning', Decimal('84.50'), 'A+'),
        ]):
            SubjectResult.objects.create(
                marksheet=self.marksheet, position=position,
                subject_name=name, marks=marks, grade=grade,
            )

        self.clock = FakeClock()
        self.service = MarksheetPdfService(
            renderer=ReportLabMarksheetRenderer(now=lambda: datetime(2025, 12, 1, 9, 0)),
            cache=PdfRenderCache(max_entries=50, ttl_seconds=300, clock=self.clock),
        )
        patcher = patch.object(apps.get_app_config('core'), 'pdf_service', self.service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def download(self, marksheet_id):
        return self.client.get('/api/generate-pdf', {'marksheetId': marksheet_id})

    def export(self, payload):
        return self.client.post(
            '/api/generate-pdf',
            data=json.dumps(payload),
            content_type='application/json',
        )


class GeneratePdfDownloadTest(GeneratePdfAPITestBase):
    """Test GET /api/generate-pdf."""

    def test_missing_marksheet_id(self):
        response = self.client.get('/api/generate-pdf')

        self.assertEqual(response.status_code, 400)
        data = json.loads(response.content)
        self.assertFalse(data['success'])
        self.assertEqual(data['error'], 'marksheetId is required')

    def test_unknown_marksheet(self):
        response = self.download(999999)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(json.loads(response.content)['error'], 'Marksheet not found')

    def test_non_numeric_marksheet_id(self):
        response = self.download('not-a-number')
        self.assertEqual(response.status_code, 404)

    def test_decimal_marksheet_id(self):
        response = self.download(f'{self.marksheet.pk}.9')
        self.assertEqual(response.status_code, 404)

    def test_download_pdf(self):
        response = self.download(self.marksheet.pk)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(
            response['Content-Disposition'],
            'attachment; filename="marksheet_311521104010_MS-2025-010.pdf"',
        )
        self.assertEqual(response['Content-Length'], str(len(response.content)))
        self.assertEqual(response['X-Cache'], 'MISS')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_second_download_is_cache_hit(self):
        first = self.download(self.marksheet.pk)
        self.clock.now += 120
        second = self.download(self.marksheet.pk)

        self.assertEqual(first['X-Cache'], 'MISS')
        self.assertEqual(second['X-Cache'], 'HIT')
        self.assertEqual(first.content, second.content)

    def test_cache_expires_after_ttl(self):
        self.download(self.marksheet.pk)
        self.clock.now += 301

        response = self.download(self.marksheet.pk)
        self.assertEqual(response['X-Cache'], 'MISS')

    def test_render_failure_returns_500_with_details(self):
        renderer = Mock()
        renderer.render.side_effect = RuntimeError('layout exploded')
        self.service.renderer = renderer

        response = self.download(self.marksheet.pk)

        self.assertEqual(response.status_code, 500)
        data = json.loads(response.content)
        self.assertEqual(data['error'], 'Failed to generate PDF')
        self.assertEqual(data['details'], 'layout exploded')

    def test_database_unreachable_returns_503(self):
        with patch('core.views_api.connection') as mock_connection:
            mock_connection.ensure_connection.side_effect = OperationalError('could not connect')
            response = self.download(self.marksheet.pk)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(json.loads(response.content)['error'], 'Database connection failed')

    def test_database_unreachable_is_not_cached(self):
        """Test that a cached PDF is not served while the database is down"""
        self.download(self.marksheet.pk)

        with patch('core.views_api.connection') as mock_connection:
            mock_connection.ensure_connection.side_effect = OperationalError('could not connect')
            first = self.download(self.marksheet.pk)
            second = self.download(self.marksheet.pk)

        self.assertEqual(first.status_code, 503)
        self.assertEqual(second.status_code, 503)

    def test_lookup_failure_returns_503(self):
        with patch('core.views_api.load_marksheet', side_effect=OperationalError('server closed')):
            response = self.download(self.marksheet.pk)

        self.assertEqual(response.status_code, 503)


class GeneratePdfExportTest(GeneratePdfAPITestBase):
    """Test POST /api/generate-pdf."""

    def test_export_base64(self):
        response = self.export({'marksheetId': self.marksheet.pk, 'returnType': 'base64'})

        self.assertEqual(response.status_code, 200)
        data = json.loads(response.content)
        self.assertTrue(data['success'])
        self.assertEqual(data['filename'], 'marksheet_311521104010_MS-2025-010.pdf')
        self.assertTrue(base64.b64decode(data['pdfBase64']).startswith(b'%PDF'))

    def test_export_defaults_to_base64(self):
        response = self.export({'marksheetId': str(self.marksheet.pk)})
        self.assertIn('pdfBase64', json.loads(response.content))

    def test_export_bypasses_cache(self):
        self.export({'marksheetId': self.marksheet.pk})
        self.assertEqual(len(self.service.cache), 0)

    def test_export_other_return_type(self):
        response = self.export({'marksheetId': self.marksheet.pk, 'returnType': 'url'})

        self.assertEqual(response.status_code, 200)
        data = json.loads(response.content)
        self.assertTrue(data['success'])
        self.assertEqual(data['message'], 'Use GET method to download PDF directly')
        self.assertNotIn('pdfBase64', data)

    def test_export_missing_marksheet_id(self):
        response = self.export({'returnType': 'base64'})
        self.assertEqual(response.status_code, 400)

    def test_export_unknown_marksheet(self):
        response = self.export({'marksheetId': 424242})
        self.assertEqual(response.status_code, 404)

    def test_export_boolean_marksheet_id(self):
        """Test that JSON booleans are not coerced to primary keys"""
        response = self.export({'marksheetId': True})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(json.loads(response.content)['error'], 'Marksheet not found')

    def test_export_float_marksheet_id(self):
        for marksheet_id in (float(self.marksheet.pk), self.marksheet.pk + 0.9, f'{self.marksheet.pk}.0'):
            with self.subTest(marksheet_id=marksheet_id):
                response = self.export({'marksheetId': marksheet_id})
                self.assertEqual(response.status_code, 404)

    def test_export_numeric_string_marksheet_id(self):
        response = self.export({'marksheetId': str(self.marksheet.pk)})
        self.assertEqual(response.status_code, 200)

    def test_export_invalid_json(self):
        response = self.client.post(
            '/api/generate-pdf', data='{not json', content_type='application/json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(json.loads(response.content)['error'], 'Invalid JSON payload')

    def test_export_render_failure(self):
        renderer = Mock()
        renderer.render.side_effect = RuntimeError('font missing')
        self.service.renderer = renderer

        response = self.export({'marksheetId': self.marksheet.pk})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(json.loads(response.content)['details'], 'font missing')


class GeneratePdfMethodsTest(GeneratePdfAPITestBase):
    """Test preflight and unsupported methods."""

    def test_options_preflight(self):
        response = self.client.options('/api/generate-pdf')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'')

    def test_put_not_allowed(self):
        response = self.client.put('/api/generate-pdf')
        self.assertEqual(response.status_code, 405)

    def test_delete_not_allowed(self):
        response = self.client.delete('/api/generate-pdf')
        self.assertEqual(response.status_code, 405)
