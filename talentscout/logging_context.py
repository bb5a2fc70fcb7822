from __future__ import annotations

from contextvars import ContextVar

_search_request_id_ctx: ContextVar[str | None] = ContextVar("search_request_id", default=None)


def get_request_id() -> str | None:
    return _search_request_id_ctx.get()


def set_request_id(value: str | None) -> None:
    _search_request_id_ctx.set(value)
