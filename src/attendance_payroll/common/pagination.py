from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Page:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_page(args: Mapping[str, Any]) -> Page:
    """Read ``page``/``limit`` query parameters."""

    try:
        page = int(args.get("page") or DEFAULT_PAGE)
        limit = int(args.get("limit") or DEFAULT_PAGE_SIZE)
    except (TypeError, ValueError):
        raise ValidationError("page and limit must be integers")
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive")
    return Page(page=page, limit=min(limit, MAX_PAGE_SIZE))


def paginated(items: Iterable[Any], page: Page, total: int) -> dict:
    return {
        "data": [i.to_dict() if hasattr(i, "to_dict") else i for i in items],
        "pagination": {
            "page": page.page,
            "limit": page.limit,
            "total": int(total),
            "pages": math.ceil(int(total) / page.limit) if total else 0,
        },
    }
