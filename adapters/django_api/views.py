"""
Kirana Django Adapter Views
===========================
Pass-through HTTP views over core/http_api handlers.
"""

from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from core.http_api.contracts import ActionHttpRequest, BillPreviewHttpRequest
from core.http_api.errors import ErrorCode, error_response
from core.http_api.handlers import (
    get_insights,
    get_state,
    post_action,
    post_bill_preview,
)


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _parse_json_body(request: HttpRequest) -> Any:
    if not request.body:
        return {}
    try:
        return json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        ErrorCode.METHOD_NOT_ALLOWED,
        "Method not allowed for this endpoint.",
        status=405,
    )


def _dispatch_write(write_handler, contract_type, request: HttpRequest):
    try:
        body = _parse_json_body(request)
    except ValueError as exc:
        return _json_error(ErrorCode.INVALID_JSON, str(exc), status=400)

    payload = write_handler(contract_type(payload=body), build_dependencies())
    return JsonResponse(payload)


@csrf_exempt
def actions_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_action, ActionHttpRequest, request)


@csrf_exempt
def bill_preview_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_bill_preview, BillPreviewHttpRequest, request)


def state_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return JsonResponse(get_state(build_dependencies()))


def insights_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return JsonResponse(get_insights(build_dependencies()))
