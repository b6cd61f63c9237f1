from app.models.city import City
from app.models.hidden import ContentReport, HiddenItem
from app.models.interaction import ItemLike, ItemShare, ItemView
from app.models.item import ContentItem

__all__ = [
    "City",
    "ContentItem",
    "ItemLike",
    "ItemView",
    "ItemShare",
    "HiddenItem",
    "ContentReport",
]
