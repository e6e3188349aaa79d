"""Agate AI — Audit Log Middleware.

Writes exactly one AiAuditLog row per request to an audited route, after the
response is produced and whatever its status. A failed write is logged and
never changes the response.
"""

import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.database import session_scope
from app.core.logging import get_logger
from app.models.ai_models import AiAuditLog

logger = get_logger("audit")

AUDITED_ROUTES = {
    "/ai/campaign-suggestion",
    "/ai/creative-idea",
}


def record_audit_log(
    route: str,
    status_code: int,
    latency_ms: int,
    user_id: Optional[uuid.UUID] = None,
    campaign_id: Optional[uuid.UUID] = None,
) -> None:
    """Append an audit row using a dedicated session. Never raises."""
    try:
        with session_scope() as session:
            session.add(
                AiAuditLog(
                    user_id=user_id,
                    route=route,
                    campaign_id=campaign_id,
                    latency_ms=latency_ms,
                    status_code=status_code,
                )
            )
    except Exception as e:
        logger.error(
            f"Error writing AI audit log: {e}",
            extra={"route": route, "status_code": status_code},
        )


class AuditMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/")
        if path not in AUDITED_ROUTES:
            return await call_next(request)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = int((time.perf_counter() - started) * 1000)
            user_id = getattr(request.state, "user_id", None)
            campaign_id = getattr(request.state, "campaign_id", None)
            logger.info(
                f"{request.method} {path} → {status_code}",
                extra={
                    "route": path,
                    "user_id": str(user_id) if user_id else None,
                    "campaign_id": str(campaign_id) if campaign_id else None,
                    "latency_ms": latency_ms,
                    "status_code": status_code,
                },
            )
            record_audit_log(path, status_code, latency_ms, user_id, campaign_id)
