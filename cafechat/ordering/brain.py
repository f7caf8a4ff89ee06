# cafechat/ordering/brain.py
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from .cart import Cart, build_summary
from .inventory import InventoryStore
from .nlp import Entity, classify_entities, entity_pairs, is_order, top_intent
from .resolver import INVALID_QUANTITY, OrderOutcome, resolve_order
from .templates import replace_params

logger = logging.getLogger(__name__)

ORDER_ACCEPTED_MSG = "Great! We've added your order to the cart."
ORDER_REJECTED_MSG = "Unfortunately, we're all out of that item today."
ORDER_BAD_QUANTITY_MSG = "Sorry, I didn't catch how many you'd like."

PROVIDE_ID_INTENT = "provide_id"
REVIEW_ORDER_INTENT = "review_order"

DEFAULT_WAIT_MINUTES = 10


class OrderEngine:
    """
    Inventory + cart for one server process.

    Every order runs resolve -> aggregate under one lock so stock can't be
    oversold when requests are handled on several threads.
    """

    def __init__(
        self,
        inventory: Optional[InventoryStore] = None,
        cart: Optional[Cart] = None,
        wait_time_minutes: int = DEFAULT_WAIT_MINUTES,
        atomic: bool = False,
    ) -> None:
        self.inventory = inventory if inventory is not None else InventoryStore()
        self.cart = cart if cart is not None else Cart()
        self.wait_time_minutes = wait_time_minutes
        self.atomic = atomic
        self._lock = threading.Lock()

    # --- state ---
    def load_inventory(self, seed: Dict[str, Any]) -> None:
        with self._lock:
            self.inventory.load(seed)

    def cart_snapshot(self) -> Tuple[List[Dict[str, Any]], str]:
        with self._lock:
            return self.cart.lines(), build_summary(self.cart)

    # --- operations ---
    def place_order(self, entities: List[Entity]) -> OrderOutcome:
        request = classify_entities(entities)
        with self._lock:
            outcome = resolve_order(entities, request.quantity, self.inventory, atomic=self.atomic)
            if outcome.accepted:
                key = self.cart.add(request)
                logger.debug("Cart %s += %d", key, request.quantity)
        return outcome

    def review_order(self) -> str:
        with self._lock:
            return build_summary(self.cart)

    # --- dispatch ---
    def update_message(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fill the NLU reply template for the turn's top intent.
        Returns `data` with output.text replaced; unknown intents pass through.
        """
        params: List[Any]
        if is_order(data):
            outcome = self.place_order(entity_pairs(data.get("entities")))
            params = [_order_reply(outcome)]
        else:
            intent = top_intent(data)
            if intent == PROVIDE_ID_INTENT:
                params = [self.wait_time_minutes]
            elif intent == REVIEW_ORDER_INTENT:
                params = [self.review_order()]
            else:
                return data

        output = data.get("output")
        if isinstance(output, dict):
            output["text"] = replace_params(output.get("text"), params)
        return data


def _order_reply(outcome: OrderOutcome) -> str:
    if outcome.accepted:
        return ORDER_ACCEPTED_MSG
    if outcome.reason == INVALID_QUANTITY:
        return ORDER_BAD_QUANTITY_MSG
    return ORDER_REJECTED_MSG
