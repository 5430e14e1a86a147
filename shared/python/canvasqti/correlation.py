"""Conversion-id context and FastAPI middleware."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

conversion_id_var: ContextVar[str] = ContextVar("conversion_id", default="")


def get_conversion_id() -> str:
    """Read current conversion id from context var."""

    return conversion_id_var.get()


@contextmanager
def conversion_scope(conversion_id: str | None = None) -> Iterator[str]:
    """Bind a conversion id for the duration of one document import.

    An id already bound by an outer scope (e.g. the HTTP middleware) is reused.
    """

    current = conversion_id_var.get()
    value = conversion_id or current or str(uuid4())
    token = conversion_id_var.set(value)
    try:
        yield value
    finally:
        conversion_id_var.reset(token)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach or generate a correlation id for each request."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        corr_id = request.headers.get("x-correlation-id", str(uuid4()))
        token = conversion_id_var.set(corr_id)
        try:
            response = await call_next(request)
            response.headers["x-correlation-id"] = corr_id
            return response
        finally:
            conversion_id_var.reset(token)
