"""
Portal JSON API Views.

This module provides the HTTP endpoints for marksheet PDF export and push
subscription checks. Responses follow the ``{'success': bool, ...}`` shape
expected by the frontend.
"""
import base64
import json
import logging

from django.apps import apps
from django.db import InterfaceError, OperationalError, connection
from django.db.models import Q
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from core.models import Marksheet, SubscriptionStatus, User

logger = logging.getLogger(__name__)

# Errors meaning the data store cannot be reached
DATA_STORE_ERRORS = (OperationalError, InterfaceError)


def error_response(message, status, **extra):
    """Build a ``{'success': False, 'error': ...}`` JSON response."""
    payload = {'success': False, 'error': message}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def parse_json_body(request):
    """
    Parse a JSON object from the request body.

    Returns:
        Dictionary with the payload, or None if the body is not a JSON object
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def get_pdf_service():
    """The process-wide MarksheetPdfService owned by the core app config."""
    return apps.get_app_config('core').pdf_service


def load_marksheet(marksheet_id):
    """
    Load a marksheet with its staff and HOD users and subjects.

    Args:
        marksheet_id: Primary key as int or string of digits

    Returns:
        Marksheet instance or None if the id is invalid or unknown
    """
    # bool is an int subclass; JSON true/false must not select pk 1/0
    if isinstance(marksheet_id, int) and not isinstance(marksheet_id, bool):
        pk = marksheet_id
    elif isinstance(marksheet_id, str) and marksheet_id.isdecimal():
        pk = int(marksheet_id)
    else:
        return None
    return (
        Marksheet.objects
        .select_related('staff', 'hod')
        .prefetch_related('subjects')
        .filter(pk=pk)
        .first()
    )


def _download_pdf(request):
    """GET: stream the PDF as an attachment, served from cache when fresh."""
    marksheet_id = request.GET.get('marksheetId')
    if not marksheet_id:
        return error_response('marksheetId is required', 400)

    try:
        marksheet = load_marksheet(marksheet_id)
    except DATA_STORE_ERRORS as e:
        logger.error(f"Database error loading marksheet {marksheet_id}: {e}")
        return error_response('Database connection failed', 503)

    if marksheet is None:
        return error_response('Marksheet not found', 404)

    try:
        result, cache_hit = get_pdf_service().get_or_render(marksheet)
    except Exception as e:
        logger.error(f"PDF generation error for marksheet {marksheet_id}: {e}", exc_info=True)
        return error_response('Failed to generate PDF', 500, details=str(e))

    response = HttpResponse(result.pdf_bytes, content_type=result.content_type)
    response['Content-Disposition'] = f'attachment; filename="{result.filename}"'
    response['Content-Length'] = str(len(result))
    response['X-Cache'] = 'HIT' if cache_hit else 'MISS'
    return response


def _export_pdf(request):
    """POST: render afresh and return the PDF as base64 JSON."""
    data = parse_json_body(request)
    if data is None:
        return error_response('Invalid JSON payload', 400)

    marksheet_id = data.get('marksheetId')
    return_type = data.get('returnType', 'base64')

    if not marksheet_id:
        return error_response('marksheetId is required', 400)

    try:
        marksheet = load_marksheet(marksheet_id)
    except DATA_STORE_ERRORS as e:
        logger.error(f"Database error loading marksheet {marksheet_id}: {e}")
        return error_response('Database connection failed', 503)

    if marksheet is None:
        return error_response('Marksheet not found', 404)

    try:
        result = get_pdf_service().render(marksheet)
    except Exception as e:
        logger.error(f"PDF generation error for marksheet {marksheet_id}: {e}", exc_info=True)
        return error_response('Failed to generate PDF', 500, details=str(e))

    if return_type == 'base64':
        return JsonResponse({
            'success': True,
            'pdfBase64': base64.b64encode(result.pdf_bytes).decode('ascii'),
            'filename': result.filename,
        })

    return JsonResponse({
        'success': True,
        'message': 'Use GET method to download PDF directly',
    })


# Marksheet Endpoints

@csrf_exempt
@require_http_methods(["GET", "POST", "OPTIONS"])
def api_generate_pdf(request):
    """
    GET /api/generate-pdf?marksheetId={id}
    POST /api/generate-pdf  {"marksheetId": id, "returnType": "base64"}

    Render a marksheet to PDF.

    Returns:
        200: PDF attachment (GET) or base64 payload (POST)
        400: Missing marksheetId or invalid payload
        404: Marksheet not found
        500: PDF generation failed
        503: Database unreachable
    """
    if request.method == 'OPTIONS':
        return HttpResponse(status=200)

    try:
        connection.ensure_connection()
    except DATA_STORE_ERRORS as e:
        logger.error(f"DB connect error in generate-pdf API: {e}")
        return error_response('Database connection failed', 503)

    try:
        if request.method == 'GET':
            return _download_pdf(request)
        return _export_pdf(request)
    except Exception as e:
        logger.error(f"Generate PDF API error: {e}", exc_info=True)
        return error_response('Internal server error', 500)


# Push Notification Endpoints

@csrf_exempt
@require_http_methods(["POST", "OPTIONS"])
def api_subscription_check(request):
    """
    POST /api/subscription-check  {"email": "..."}

    Report whether a user has active push subscriptions.

    Returns:
        200: {success, hasSubscription, subscriptionCount}
        400: Email missing or invalid payload
        404: User not found
        500: Unexpected error
        503: Database unreachable
    """
    if request.method == 'OPTIONS':
        return HttpResponse(status=200)

    data = parse_json_body(request)
    if data is None:
        return error_response('Invalid JSON payload', 400)

    email = data.get('email')
    if not email:
        return error_response('Email is required', 400)

    try:
        user = User.objects.filter(email=email).first()
        if user is None:
            return error_response('User not found', 404)

        subscription_count = user.push_subscriptions.filter(
            Q(active=True) | Q(status=SubscriptionStatus.ACTIVE)
        ).count()
    except DATA_STORE_ERRORS as e:
        logger.error(f"Database error in subscription check: {e}")
        return error_response('Database connection failed', 503)
    except Exception as e:
        logger.error(f"Subscription check error: {e}", exc_info=True)
        return error_response('Failed to check subscription status', 500)

    return JsonResponse({
        'success': True,
        'hasSubscription': subscription_count > 0,
        'subscriptionCount': subscription_count,
    })
