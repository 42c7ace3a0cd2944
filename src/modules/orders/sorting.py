"""Main-list sorting.

Machine lanes hold a hand-curated physical sequence, so sorting only
ever touches orders sitting in the main list.  Everything else is passed
through in its stored relative order, after the main list.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Sequence

from modules.orders.constants import MAIN_LIST, SortKey
from modules.orders.dtos import OrderRecord


def collation_key(text: str) -> tuple[str, str]:
    """Locale-independent approximation of a natural-language collation.

    Compares accent- and case-insensitively first ("Äpfel" sorts with
    "apfel", before "Birne"), then falls back to the case-folded text so
    the order is total.
    """
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, folded


def _by_product(order: OrderRecord) -> tuple[str, str]:
    return collation_key(order.product_name)


def _by_id(order: OrderRecord) -> int:
    return order.id


_SORTS: dict[str, tuple[Callable[[OrderRecord], object], bool]] = {
    SortKey.ID_ASC.value: (_by_id, False),
    SortKey.ID_DESC.value: (_by_id, True),
    SortKey.PRODUCT_ASC.value: (_by_product, False),
    SortKey.PRODUCT_DESC.value: (_by_product, True),
}


def partition_by_location(
    orders: Sequence[OrderRecord],
) -> tuple[list[OrderRecord], list[OrderRecord]]:
    """Split into ``(main_list, elsewhere)``, keeping relative order."""
    main_list: list[OrderRecord] = []
    elsewhere: list[OrderRecord] = []
    for order in orders:
        (main_list if order.location == MAIN_LIST else elsewhere).append(order)
    return main_list, elsewhere


def sort_for_display(orders: Sequence[OrderRecord], sort_key: str) -> list[OrderRecord]:
    """Sorted main list followed by the untouched machine-lane orders.

    Unknown keys (including ``manual``) leave the main list as stored.
    Sorts are stable, so ties keep their stored order.
    """
    main_list, elsewhere = partition_by_location(orders)
    rule = _SORTS.get(sort_key)
    if rule is not None:
        key, reverse = rule
        main_list.sort(key=key, reverse=reverse)
    return main_list + elsewhere
