# cafechat/ordering/cart.py
from __future__ import annotations

from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from .nlp import NO_MODIFIER, ParsedOrderRequest

KEY_SEP = ":"


class CartKey(NamedTuple):
    """
    Aggregation identity of a cart line.
    Drinks carry (size, milk, flavor); everything else only the item name.
    """

    item: str
    size: Optional[str] = None
    milk: Optional[str] = None
    flavor: Optional[str] = None

    @classmethod
    def for_request(cls, request: ParsedOrderRequest) -> "CartKey":
        if request.is_drink:
            return cls(request.primary_item, request.size, request.milk, request.flavor)
        return cls(request.primary_item)

    @classmethod
    def parse(cls, raw: str) -> "CartKey":
        """'muffin' or 'latte:large:skim:vanilla'."""
        parts = str(raw).split(KEY_SEP)
        if len(parts) == 1:
            return cls(parts[0])
        if len(parts) == 4:
            return cls(*parts)
        raise ValueError(f"Bad cart key: {raw!r}")

    @property
    def is_drink(self) -> bool:
        return self.size is not None

    def __str__(self) -> str:
        if not self.is_drink:
            return self.item
        return KEY_SEP.join([self.item, self.size or "", self.milk or NO_MODIFIER, self.flavor or NO_MODIFIER])


def _coerce_qty(value: Any) -> int:
    # never let a bad quantity leak into totals
    if isinstance(value, bool):
        return 0
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class Cart:
    """Ordered CartKey -> quantity. Matching keys always sum."""

    def __init__(self) -> None:
        self._lines: Dict[CartKey, int] = {}

    def add(self, request: ParsedOrderRequest) -> Optional[CartKey]:
        """Fold an accepted order in. Orders without an item are ignored."""
        if not request.primary_item:
            return None
        key = CartKey.for_request(request)
        self.add_key(key, request.quantity)
        return key

    def add_key(self, key: Union[CartKey, str], quantity: Any) -> int:
        if isinstance(key, str):
            key = CartKey.parse(key)
        qty = _coerce_qty(quantity)
        if qty <= 0:
            return self._lines.get(key, 0)
        self._lines[key] = self._lines.get(key, 0) + qty
        return self._lines[key]

    def quantity(self, key: Union[CartKey, str]) -> int:
        if isinstance(key, str):
            key = CartKey.parse(key)
        return self._lines.get(key, 0)

    def items(self) -> List[Tuple[CartKey, int]]:
        return list(self._lines.items())

    def clear(self) -> None:
        self._lines.clear()

    def lines(self) -> List[Dict[str, Any]]:
        """One record per cart line; item names may contain anything, including ':'."""
        return [{**key._asdict(), "quantity": qty} for key, qty in self._lines.items()]

    def __iter__(self) -> Iterator[CartKey]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


# ----------------------------
# Summary
# ----------------------------
def _has(modifier: Optional[str]) -> bool:
    return bool(modifier) and modifier != NO_MODIFIER


def _pluralize(name: str, qty: int) -> str:
    return name + "s" if qty > 1 else name


def _modifier_phrase(milk: Optional[str], flavor: Optional[str]) -> str:
    if _has(milk) and _has(flavor):
        return f" with {milk} milk and {flavor}"
    if _has(milk):
        return f" with {milk} milk"
    if _has(flavor):
        return f" with {flavor}"
    return ""


def describe_line(key: CartKey, qty: int) -> str:
    """'3 muffins', '2 large lattes with skim milk and vanilla'."""
    name = _pluralize(key.item, qty)
    if not key.is_drink:
        return f"{qty} {name}"
    return f"{qty} {key.size} {name}" + _modifier_phrase(key.milk, key.flavor)


def build_summary(cart: Cart) -> str:
    return ", ".join(describe_line(key, qty) for key, qty in cart.items())
