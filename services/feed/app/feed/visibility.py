"""Feed visibility rules: tenant isolation and per-user hidden items."""

import logging
from collections.abc import Collection, Iterable
from typing import TypeVar
from uuid import UUID

from app.models.item import ContentItem

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=ContentItem)


def filter_visible(
    items: Iterable[ItemT],
    city_id: str,
    hidden_item_ids: Collection[UUID] = frozenset(),
) -> list[ItemT]:
    """Return the items this viewer may see, in their original order.

    Items from another city are dropped and logged; the storage query is
    already scoped by city, so any such item indicates a bug upstream.
    """
    visible: list[ItemT] = []
    for item in items:
        if item.city_id != city_id:
            logger.warning(
                "Security: dropped item %s of city %s from feed of city %s",
                item.item_id,
                item.city_id,
                city_id,
            )
            continue
        if item.item_id in hidden_item_ids:
            continue
        visible.append(item)
    return visible
