# cafechat/ordering/nlp.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

# (entity kind, value) as reported by the NLU service
Entity = Tuple[str, str]

# ----------------------------
# Entity kinds
# ----------------------------
NUMBER_KIND = "number"
DRINK_KINDS = {"coffee", "drink"}

# slot index inside ParsedOrderRequest.modifiers
MODIFIER_SLOTS: Dict[str, int] = {
    "size": 0,
    "milk": 1,
    "flavor": 2,
}

# "nothing chosen" values for (size, milk, flavor)
DEFAULT_SIZE = "small"
NO_MODIFIER = "0"
DEFAULT_MODIFIERS: Tuple[str, str, str] = (DEFAULT_SIZE, NO_MODIFIER, NO_MODIFIER)

ORDER_INTENT = "order"

# "2", " 2 ", "2.0" (sys-number style values)
_INT_RE = re.compile(r"^\s*(-?\d+)(?:\.0*)?\s*$")


@dataclass(frozen=True)
class ParsedOrderRequest:
    quantity: int = 1
    is_drink: bool = False
    primary_item: str = ""
    modifiers: Tuple[str, str, str] = DEFAULT_MODIFIERS

    @property
    def size(self) -> str:
        return self.modifiers[0]

    @property
    def milk(self) -> str:
        return self.modifiers[1]

    @property
    def flavor(self) -> str:
        return self.modifiers[2]


# ----------------------------
# Turn helpers
# ----------------------------
def entity_pairs(entities: Optional[Iterable[Any]]) -> List[Entity]:
    """
    Flatten NLU entities into (kind, value) pairs.
    Accepts dicts ({"entity": ..., "value": ...}) or objects with the same attributes.
    Entries without a kind are dropped.
    """
    out: List[Entity] = []
    for e in entities or []:
        if isinstance(e, dict):
            kind, value = e.get("entity"), e.get("value")
        else:
            kind, value = getattr(e, "entity", None), getattr(e, "value", None)
        if not kind:
            continue
        out.append((str(kind), "" if value is None else str(value)))
    return out


def top_intent(turn: Dict[str, Any]) -> str:
    intents = turn.get("intents") or []
    if not intents or not isinstance(intents[0], dict):
        return ""
    return str(intents[0].get("intent") or "")


def is_order(turn: Dict[str, Any]) -> bool:
    return top_intent(turn) == ORDER_INTENT and bool(turn.get("entities"))


# ----------------------------
# Quantity + classification
# ----------------------------
def parse_quantity(value: Any) -> Optional[int]:
    """
    Integer quantity from an entity value, or None when it isn't one.
    Zero and negative counts come back as-is; the resolver refuses them.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    m = _INT_RE.match(str(value or ""))
    if not m:
        return None
    return int(m.group(1))


def classify_entities(entities: Iterable[Entity]) -> ParsedOrderRequest:
    """
    Build the structured order request for one NLU turn.

    The last "number" entity sets the quantity. Drink kinds flag the order as a
    drink; size/milk/flavor fill the modifier slots; any other kind names the
    primary item. Later entities overwrite earlier ones.
    """
    pairs = list(entities)

    quantity = 1
    for kind, value in pairs:
        if kind == NUMBER_KIND:
            parsed = parse_quantity(value)
            quantity = parsed if parsed is not None else 1

    is_drink = False
    primary_item = ""
    modifiers = list(DEFAULT_MODIFIERS)
    for kind, value in pairs:
        if kind == NUMBER_KIND:
            continue
        if kind in DRINK_KINDS:
            is_drink = True
            primary_item = value
        elif kind in MODIFIER_SLOTS:
            modifiers[MODIFIER_SLOTS[kind]] = value
        else:
            primary_item = value

    return ParsedOrderRequest(
        quantity=quantity,
        is_drink=is_drink,
        primary_item=primary_item,
        modifiers=(modifiers[0], modifiers[1], modifiers[2]),
    )
