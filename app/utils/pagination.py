"""
Pagination helpers for list endpoints.
"""
import math
from typing import Any, Dict

from sqlalchemy.orm import Query

from app.core.exceptions import ValidationError


def validate_pagination_params(page: int, limit: int, max_limit: int = 100) -> None:
    """Reject page/limit values outside 1..max_limit."""
    if page < 1:
        raise ValidationError("Page must be greater than or equal to 1")
    if limit < 1:
        raise ValidationError("Limit must be greater than or equal to 1")
    if limit > max_limit:
        raise ValidationError(f"Limit must not exceed {max_limit}")


def get_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def paginate(query: Query, page: int, limit: int) -> Query:
    """Apply 1-indexed page/limit to a SQLAlchemy query."""
    return query.offset(get_offset(page, limit)).limit(limit)


def get_pagination_metadata(total: int, page: int, limit: int) -> Dict[str, Any]:
    """
    Build pagination metadata.

    Example: get_pagination_metadata(100, 1, 20)
    -> {"page": 1, "limit": 20, "total": 100, "total_pages": 5}
    """
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if limit else 0
    }
