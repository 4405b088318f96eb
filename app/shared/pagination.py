"""Pagination utilities."""

from typing import Any, Dict, Sequence

from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select


class PaginationParams(BaseModel):
    """Pagination parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    size: int = Field(default=20, ge=1, le=100, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def page_count(total: int, size: int) -> int:
    """Number of pages needed for ``total`` items, ceiling division."""
    return (total + size - 1) // size if size > 0 else 0


def single_page(items: Sequence[Any]) -> Dict[str, Any]:
    """Wrap an unpaginated result in the same shape as `paginate`."""
    return {
        "items": list(items),
        "total": len(items),
        "page": 1,
        "size": len(items),
        "has_next": False,
        "has_prev": False,
        "total_pages": 1 if items else 0,
    }


async def paginate(db: AsyncSession, query: Select, pagination: PaginationParams) -> Dict[str, Any]:
    """
    Paginate a SQLAlchemy query.

    Args:
        db: Database session
        query: SQLAlchemy select query, already ordered
        pagination: Pagination parameters

    Returns:
        Dictionary with pagination info and items
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    total_pages = page_count(total, pagination.size)

    result = await db.execute(query.offset(pagination.offset).limit(pagination.size))
    items = result.scalars().all()

    return {
        "items": list(items),
        "total": total,
        "page": pagination.page,
        "size": pagination.size,
        "has_next": pagination.page < total_pages,
        "has_prev": pagination.page > 1,
        "total_pages": total_pages,
    }
