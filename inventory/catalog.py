"""
Read-only catalog lookups shared by order intake and sales analytics.

Both helpers key their result by the canonical string form of the menu
item's UUID, which is also how order line items store their ``item_id``.
"""

import uuid

from .models import MenuItem


def normalize_item_id(value):
    """Return the canonical UUID string for ``value``, or None if it cannot be a menu item id."""
    try:
        return str(uuid.UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        return None


def lookup_menu_items(item_ids):
    """
    Fetch the menu items referenced by ``item_ids`` in a single query.

    Ids that are not well-formed UUIDs cannot exist, so they are left out of
    the query and are simply missing from the returned mapping.
    """
    wanted = {normalize_item_id(item_id) for item_id in item_ids}
    wanted.discard(None)
    if not wanted:
        return {}

    items = MenuItem.objects.select_related('category').filter(id__in=wanted)
    return {str(item.id): item for item in items}


def catalog_snapshot():
    """Full scan of the current catalog; the catalog is small enough to hold in memory."""
    return {str(item.id): item for item in MenuItem.objects.select_related('category')}
