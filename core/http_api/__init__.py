"""
Kirana HTTP API - Public API
============================
"""

from core.http_api.contracts import (
    ActionHttpRequest,
    BillPreviewHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import ErrorCode, error_response, success_response
from core.http_api.handlers import (
    get_insights,
    get_state,
    post_action,
    post_bill_preview,
)

__all__ = [
    "ActionHttpRequest",
    "BillPreviewHttpRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "ErrorCode",
    "error_response",
    "success_response",
    "get_state",
    "get_insights",
    "post_action",
    "post_bill_preview",
]
