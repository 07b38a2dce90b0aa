"""Paged listing over a MongoDB collection."""
import math
from typing import Awaitable, Callable, TypeVar

from hr_workflow.models.common import Page

T = TypeVar("T")


async def paginate(
    collection,
    query: dict,
    sort: list[tuple[str, int]],
    page: int,
    limit: int,
    convert: Callable[[list[dict]], Awaitable[list[T]]],
) -> Page[T]:
    """
    Fetch one page of documents matching ``query``.

    Args:
        collection: MongoDB collection
        query: Filter document
        sort: Sort keys, e.g. [("created_at", -1)]
        page: 1-based page number
        limit: Page size
        convert: Async converter from the page of documents to models

    Returns:
        Page with items, total_pages, current_page and total
    """
    page = max(page, 1)
    limit = max(limit, 1)

    cursor = collection.find(query).sort(sort).skip((page - 1) * limit).limit(limit)
    docs = await cursor.to_list(length=limit)
    total = await collection.count_documents(query)

    return Page(
        items=await convert(docs),
        total_pages=math.ceil(total / limit),
        current_page=page,
        total=total,
    )
