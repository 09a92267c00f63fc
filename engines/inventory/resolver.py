"""
Kirana Inventory Engine - Item Resolver
=========================================
Maps a free-text product name onto a catalog entry.

Matching heuristic (deliberately fuzzy):
- case-insensitive
- a catalog item matches when the query is contained in its name
  OR its name is contained in the query ("milk" → "Amul Milk",
  "maggi noodles masala" → "Maggi Noodles")
- a catalog item whose whole name equals the query wins outright,
  so a name the resolver handed out always resolves back to the
  same product ("Amul Milk" never lands on a newer "Milk")
- otherwise the FIRST match in catalog order wins; the catalog is
  kept most-recently-added first, so newer products shadow older
  ones sharing a substring

Ambiguity between several matching products is accepted. Callers
decide what "not found" means (create, ignore, or price from the line).
"""

from __future__ import annotations

from typing import Optional, Sequence

from core.primitives.item import InventoryItem


def _normalize(name: str) -> str:
    return name.strip().casefold() if isinstance(name, str) else ""


def names_match(query_name: str, item_name: str) -> bool:
    query = _normalize(query_name)
    candidate = _normalize(item_name)
    if not query or not candidate:
        return False
    return query in candidate or candidate in query


def resolve_index(
    query_name: str, catalog: Sequence[InventoryItem],
) -> Optional[int]:
    """Position of the exactly named item, else of the first match, or None."""
    exact = find_exact(query_name, catalog)
    if exact is not None:
        return exact
    for index, item in enumerate(catalog):
        if names_match(query_name, item.name):
            return index
    return None


def resolve_item(
    query_name: str, catalog: Sequence[InventoryItem],
) -> Optional[InventoryItem]:
    """Item at resolve_index(), or None (not found)."""
    index = resolve_index(query_name, catalog)
    if index is None:
        return None
    return catalog[index]


def find_exact(
    name: str, catalog: Sequence[InventoryItem],
) -> Optional[int]:
    """Position of the item whose name equals `name` ignoring case."""
    wanted = _normalize(name)
    if not wanted:
        return None
    for index, item in enumerate(catalog):
        if _normalize(item.name) == wanted:
            return index
    return None
