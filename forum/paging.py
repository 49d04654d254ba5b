from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Optional, Tuple, TypeVar

from flask import current_app

T = TypeVar("T")


@dataclass(frozen=True)
class PagingRequest:
    current_page: int = 1
    page_size: Optional[int] = None  # None -> DEFAULT_PAGE_SIZE

    def normalized(self) -> "PagingRequest":
        """Clamp the request into the range the store can serve.

        Page is at least 1; page size is between 1 and MAX_PAGE_SIZE.
        """
        default_size = int(current_app.config.get("DEFAULT_PAGE_SIZE", 25))
        max_size = int(current_app.config.get("MAX_PAGE_SIZE", 100))

        page = max(int(self.current_page), 1)
        size = default_size if self.page_size is None else int(self.page_size)
        size = min(max(size, 1), max_size)
        return PagingRequest(current_page=page, page_size=size)


@dataclass(frozen=True)
class PageOf(Generic[T]):
    items: Tuple[T, ...]
    row_count: int
    request: PagingRequest

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    @property
    def page_count(self) -> int:
        size = self.request.page_size or 1
        return (self.row_count + size - 1) // size

    @classmethod
    def empty(cls, request: PagingRequest) -> "PageOf[T]":
        return cls(items=(), row_count=0, request=request)


def paginate(query, paging: Optional[PagingRequest]):
    """Run an ordered query through Flask-SQLAlchemy's paginator.

    Returns the raw pagination object and the normalized request it was
    built from; ``pagination.total`` counts the filtered query.
    """
    request = (paging or PagingRequest()).normalized()
    pagination = query.paginate(
        page=request.current_page,
        per_page=request.page_size,
        error_out=False,
    )
    return pagination, request
