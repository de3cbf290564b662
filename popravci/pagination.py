import math
from typing import List, Sequence, TypeVar

T = TypeVar("T")


def total_pages(total_count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    return math.ceil(total_count / page_size)


def paginate(items: Sequence[T], page_number: int, page_size: int) -> List[T]:
    """Return the 1-indexed page of ``items``; pages past the end are empty."""
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    if page_number < 1:
        return []
    start = (page_number - 1) * page_size
    return list(items[start:start + page_size])
