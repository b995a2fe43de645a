"""Pagination: best-effort Pager extraction from request parameters."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from fastapi_request_context.binding import bind
from fastapi_request_context.context import RequestContext
from fastapi_request_context.exceptions import BindError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class Pager(BaseModel):
    """Page descriptor for list endpoints. Call ``secure()`` before use."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = 1
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, alias="pageSize")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def secure(
        self,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> Pager:
        if self.page < 1:
            self.page = 1
        if self.page_size <= 0:
            self.page_size = default_page_size
        if self.page_size > max_page_size:
            self.page_size = max_page_size
        return self


async def extract_pager(
    ctx: RequestContext,
    *,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Pager:
    """Bind ``page``/``pageSize``; unparseable input falls back to defaults."""
    try:
        pager = await bind(ctx, Pager)
    except BindError as exc:
        logger.debug("pager bind failed, using defaults: %s", exc)
        pager = Pager(page_size=default_page_size)
    if "page_size" not in pager.model_fields_set:
        pager.page_size = default_page_size
    return pager.secure(
        default_page_size=default_page_size, max_page_size=max_page_size
    )
