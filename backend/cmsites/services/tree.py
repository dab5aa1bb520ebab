"""
Helpers for the parent/child trees formed by layouts and pages.

Items are plain ORM rows with ``id``, ``parent_id`` and ``position``; the
helpers only look at already loaded rows and never hit the database.
"""
from collections import defaultdict

from cmsites.utils.text import squeeze


def _sort_key(item):
    return item.position or 0


def children_index(items) -> dict:
    """Map each parent id (``None`` for roots) to its ordered children."""
    index = defaultdict(list)
    for item in items:
        index[item.parent_id].append(item)
    for children in index.values():
        children.sort(key=_sort_key)
    return index


def roots(items) -> list:
    return children_index(items).get(None, [])


def descendants(item, items) -> list:
    """Every node below ``item``, parents before their children."""
    index = children_index(items)
    result = []
    stack = list(reversed(index.get(item.id, [])))
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(reversed(index.get(node.id, [])))
    return result


def flatten(items) -> list:
    """All roots, followed by the descendants of each root in turn."""
    top = roots(items)
    result = list(top)
    for root in top:
        result.extend(descendants(root, items))
    return result


def page_full_path(parent_full_path: str | None, slug: str | None) -> str:
    """``/`` for a root page, ``<parent path>/<slug>`` below it."""
    if parent_full_path is None:
        return "/"
    return squeeze(f"{parent_full_path}/{slug or ''}", "/")
