# cafechat/ordering/resolver.py
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .inventory import InventoryStore
from .nlp import MODIFIER_SLOTS, NUMBER_KIND, Entity

logger = logging.getLogger(__name__)

OUT_OF_STOCK = "out of stock"
INVALID_QUANTITY = "invalid quantity"


@dataclass(frozen=True)
class OrderOutcome:
    accepted: bool
    reason: Optional[str] = None
    # entities whose stock was taken, in check order
    committed: Tuple[Entity, ...] = ()

    @classmethod
    def accept(cls, committed: Iterable[Entity] = ()) -> "OrderOutcome":
        return cls(accepted=True, committed=tuple(committed))

    @classmethod
    def reject(cls, reason: str, committed: Iterable[Entity] = ()) -> "OrderOutcome":
        return cls(accepted=False, reason=reason, committed=tuple(committed))


def _stock_checks(entities: Iterable[Entity], inventory: InventoryStore) -> List[Entity]:
    """
    Entities that must pass an inventory check, in turn order.
    Modifier kinds (size/milk/flavor) are only checked when the inventory
    stocks that category; everything else is always checked.
    """
    out: List[Entity] = []
    for kind, value in entities:
        if kind == NUMBER_KIND:
            continue
        if kind in MODIFIER_SLOTS and not inventory.tracks(kind):
            continue
        out.append((kind, value))
    return out


def resolve_order(
    entities: Iterable[Entity],
    quantity: int,
    inventory: InventoryStore,
    atomic: bool = False,
) -> OrderOutcome:
    """
    Take `quantity` of every entity of the order from the inventory.

    Default mode stops at the first entity that can't be served. Stock already
    taken for earlier entities of the same order stays taken
    (PartialCommitOnReject). With atomic=True everything is checked first and
    nothing is taken unless the whole order can be served.
    """
    entities = list(entities)

    if quantity < 1:
        logger.info("Rejected order: quantity %d (%s)", quantity, INVALID_QUANTITY)
        return OrderOutcome.reject(INVALID_QUANTITY)

    # modifiers on their own ("a large") name nothing to put in the cart
    if not any(kind != NUMBER_KIND and kind not in MODIFIER_SLOTS for kind, _ in entities):
        logger.info("Rejected order: no item in %s (%s)", entities, OUT_OF_STOCK)
        return OrderOutcome.reject(OUT_OF_STOCK)

    checks = _stock_checks(entities, inventory)

    if atomic:
        return _resolve_atomic(checks, quantity, inventory)

    committed: List[Entity] = []
    for kind, value in checks:
        if not inventory.take(kind, value, quantity):
            logger.info("Rejected order: %s %r x%d (%s)", kind, value, quantity, OUT_OF_STOCK)
            if committed:
                logger.info("Keeping stock already taken for %s", committed)
            return OrderOutcome.reject(OUT_OF_STOCK, committed)
        committed.append((kind, value))

    return OrderOutcome.accept(committed)


def _resolve_atomic(checks: List[Entity], quantity: int, inventory: InventoryStore) -> OrderOutcome:
    # same item named twice needs twice the stock
    demand = Counter(checks)
    for (kind, value), times in demand.items():
        if not inventory.can_take(kind, value, quantity * times):
            logger.info("Rejected order: %s %r x%d (%s)", kind, value, quantity * times, OUT_OF_STOCK)
            return OrderOutcome.reject(OUT_OF_STOCK)

    for kind, value in checks:
        inventory.take(kind, value, quantity)
    return OrderOutcome.accept(checks)
