"""
Kirana HTTP API - Framework-Agnostic Handlers
=============================================
Pure handler functions over contracts and injected dependencies.
Every handler returns a success/error envelope dict; the transport
adapter only serialises it.
"""

from __future__ import annotations

import logging
from typing import Any

from core.http_api.contracts import ActionHttpRequest, BillPreviewHttpRequest
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import success_response
from projections.insights import build_insights

logger = logging.getLogger("kirana.http")


def post_action(
    request: ActionHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    result = dependencies.service.submit(request.payload)
    if not result.applied:
        logger.info(f"Action not applied: {result.reason}")
    return success_response(
        {
            "result": result.to_dict(),
            "state": result.state.to_dict(),
        }
    )


def get_state(dependencies: HttpApiDependencies) -> dict[str, Any]:
    return success_response(dependencies.service.snapshot().to_dict())


def get_insights(dependencies: HttpApiDependencies) -> dict[str, Any]:
    now = dependencies.clock.now_utc()
    insights = build_insights(
        dependencies.service.snapshot(),
        now=now,
        settings=dependencies.settings,
    )
    return success_response(
        insights.to_dict(),
        meta={"generated_at": now.isoformat()},
    )


def post_bill_preview(
    request: BillPreviewHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    preview = dependencies.service.preview(request.payload)
    return success_response(preview.to_dict())
