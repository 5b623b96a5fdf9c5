"""
Page arithmetic for ride listings.

Pages and limits are 1-based.  ``parse_page_params`` turns raw query
values into integers (or rejects them) and ``paginate`` computes the
slice bounds and neighbour references for a collection of a given
size.  Neither function touches storage.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..core.errors import RideValidationError
from ..schemas.ride import PageRef

INVALID_PAGE = "INVALID_PAGE"
INVALID_LIMIT = "INVALID_LIMIT"

# ASCII digits only, short enough that int() never hits its digit limit.
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]{1,18}")


@dataclass(frozen=True)
class PageWindow:
    """Slice ``[start, end)`` of the ordered collection plus neighbours."""

    start: int
    end: int
    next: Optional[PageRef] = None
    previous: Optional[PageRef] = None

    @property
    def size(self) -> int:
        return self.end - self.start


def _parse_positive(value: Any, rule: str, name: str) -> int:
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        parsed = int(text, 10) if INTEGER_PATTERN.fullmatch(text) else None
    if parsed is None or parsed < 1:
        raise RideValidationError(
            rule, f"{name} must be a positive integer", field=name.lower()
        )
    return parsed


def parse_page_params(
    page: Any, limit: Any, default_limit: int = 10, max_limit: int = 100
) -> Tuple[int, int]:
    """Return ``(page, limit)`` from raw query values.

    Missing values (``None`` or an empty string) fall back to page 1 and
    ``default_limit``.  Anything present must be a positive base-10
    integer, and ``limit`` may not exceed ``max_limit``.
    """
    if page is None or page == "":
        page_number = 1
    else:
        page_number = _parse_positive(page, INVALID_PAGE, "Page")

    if limit is None or limit == "":
        page_size = default_limit
    else:
        page_size = _parse_positive(limit, INVALID_LIMIT, "Limit")
    if page_size > max_limit:
        raise RideValidationError(
            INVALID_LIMIT, f"Limit must not exceed {max_limit}", field="limit"
        )
    return page_number, page_size


def paginate(total_count: int, page: int, limit: int) -> PageWindow:
    """Compute the window for ``page`` of size ``limit`` over ``total_count`` items."""
    start_index = (page - 1) * limit
    end_index = page * limit

    next_ref = PageRef(page=page + 1, limit=limit) if end_index < total_count else None
    previous_ref = PageRef(page=page - 1, limit=limit) if start_index > 0 else None

    return PageWindow(
        start=min(max(start_index, 0), total_count),
        end=min(max(end_index, 0), total_count),
        next=next_ref,
        previous=previous_ref,
    )
