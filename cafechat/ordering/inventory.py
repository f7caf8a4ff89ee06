# cafechat/ordering/inventory.py
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

# True = always in stock, int = units left
Stock = Union[bool, int]


def _coerce_stock(raw: Any) -> Stock | None:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int):
        return max(0, raw)
    if isinstance(raw, float) and raw.is_integer():
        return max(0, int(raw))
    if isinstance(raw, str):
        s = raw.strip().lower()
        if s in {"true", "false"}:
            return s == "true"
        if s.isdigit():
            return int(s)
    return None


class InventoryStore:
    """
    Stock per (category, item). Categories match NLU entity kinds,
    items match entity values.

    Anything not in the store is unavailable, so an empty store (seed not
    loaded yet) refuses every order.
    """

    def __init__(self, seed: Dict[str, Any] | None = None) -> None:
        self._stock: Dict[str, Dict[str, Stock]] = {}
        self._loaded = False
        if seed is not None:
            self.load(seed)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, seed: Dict[str, Any]) -> None:
        """Replace the whole store from a {category: {item: bool|int}} document."""
        stock: Dict[str, Dict[str, Stock]] = {}
        for category, items in (seed or {}).items():
            if not isinstance(items, dict):
                logger.warning("Skipping inventory category %r: expected an object", category)
                continue
            bucket: Dict[str, Stock] = {}
            for item, raw in items.items():
                value = _coerce_stock(raw)
                if value is None:
                    logger.warning("Skipping inventory item %s/%s: bad stock value %r", category, item, raw)
                    continue
                bucket[str(item)] = value
            stock[str(category)] = bucket

        self._stock = stock
        self._loaded = True
        logger.info("Inventory loaded: %d categories, %d items", len(stock), sum(len(b) for b in stock.values()))

    def tracks(self, category: str) -> bool:
        return category in self._stock

    def available(self, category: str, item: str) -> Stock:
        """Stored value for an item; False when unknown."""
        return self._stock.get(category, {}).get(item, False)

    def can_take(self, category: str, item: str, quantity: int) -> bool:
        have = self.available(category, item)
        if have is True:
            return True
        if have is False:
            return False
        return have >= quantity

    def take(self, category: str, item: str, quantity: int) -> bool:
        """
        Check-then-decrement for one item.
        "Always available" items pass without being decremented.
        Callers serialise access (see OrderEngine).
        """
        if not self.can_take(category, item, quantity):
            return False
        have = self._stock[category][item]
        if have is not True:
            self._stock[category][item] = have - quantity
        return True

    def snapshot(self) -> Dict[str, Dict[str, Stock]]:
        return copy.deepcopy(self._stock)

    def __len__(self) -> int:
        return sum(len(b) for b in self._stock.values())
