import threading

from cafechat.ordering.brain import ORDER_ACCEPTED_MSG, ORDER_BAD_QUANTITY_MSG, ORDER_REJECTED_MSG, OrderEngine
from cafechat.ordering.inventory import InventoryStore


def _turn(intent, entities=(), text=("{0}",)):
    return {
        "intents": [{"intent": intent, "confidence": 0.98}],
        "entities": [{"entity": k, "value": v} for k, v in entities],
        "output": {"text": list(text)},
        "context": {"conversation_id": "abc"},
    }


def test_end_to_end_drink_order():
    engine = OrderEngine(inventory=InventoryStore({"drink": {"latte": 5}}))
    turn = _turn("order", [("drink", "latte"), ("size", "large"), ("number", "2")])

    out = engine.update_message(turn)

    assert out["output"]["text"] == [ORDER_ACCEPTED_MSG]
    assert engine.inventory.available("drink", "latte") == 3
    assert engine.cart.quantity("latte:large:0:0") == 2
    assert engine.cart.lines() == [{"item": "latte", "size": "large", "milk": "0", "flavor": "0", "quantity": 2}]


def test_order_accepted_increases_cart_by_quantity(engine):
    engine.update_message(_turn("order", [("pastry", "muffin")]))
    engine.update_message(_turn("order", [("pastry", "muffin"), ("number", "2")]))
    assert engine.cart.quantity("muffin") == 3
    assert engine.inventory.available("pastry", "muffin") == 1


def test_order_rejected_leaves_cart_alone(engine):
    turn = _turn("order", [("pastry", "scone"), ("number", "2")], text=["Okay.", "{0}"])
    out = engine.update_message(turn)
    assert out["output"]["text"] == ["Okay. " + ORDER_REJECTED_MSG]
    assert len(engine.cart) == 0
    assert engine.inventory.available("pastry", "scone") == 1


def test_rejected_multi_item_order_keeps_earlier_decrements(engine):
    turn = _turn("order", [("drink", "latte"), ("milk", "oat"), ("number", "3")])
    engine.update_message(turn)
    assert len(engine.cart) == 0
    assert engine.inventory.available("drink", "latte") == 2
    assert engine.inventory.available("milk", "oat") == 2


def test_atomic_engine_rolls_nothing_forward(inventory):
    engine = OrderEngine(inventory=inventory, atomic=True)
    engine.update_message(_turn("order", [("drink", "latte"), ("milk", "oat"), ("number", "3")]))
    assert engine.inventory.available("drink", "latte") == 5


def test_order_intent_without_entities_passes_through(engine):
    turn = _turn("order", [])
    out = engine.update_message(turn)
    assert out["output"]["text"] == ["{0}"]


def test_provide_id_fills_wait_time(inventory):
    engine = OrderEngine(inventory=inventory, wait_time_minutes=12)
    out = engine.update_message(_turn("provide_id", text=["Your wait is", "{0}", "minutes"]))
    assert out["output"]["text"] == ["Your wait is 12 minutes"]


def test_provide_id_default_wait(engine):
    out = engine.update_message(_turn("provide_id", text=["Your wait is", "{0}", "minutes"]))
    assert out["output"]["text"] == ["Your wait is 10 minutes"]


def test_review_order_renders_cart(engine):
    engine.update_message(
        _turn("order", [("drink", "latte"), ("size", "large"), ("milk", "skim"), ("flavor", "vanilla"), ("number", "2")])
    )
    engine.update_message(_turn("order", [("pastry", "muffin")]))

    out = engine.update_message(_turn("review_order", text=["You ordered", "{0}."]))
    assert out["output"]["text"] == ["You ordered 2 large lattes with skim milk and vanilla, 1 muffin."]


def test_review_empty_cart(engine):
    out = engine.update_message(_turn("review_order", text=["You ordered:", "{0}"]))
    assert out["output"]["text"] == ["You ordered: "]


def test_other_intents_pass_through(engine):
    turn = _turn("greeting", [("pastry", "muffin")], text=["Hi!", "{0}"])
    out = engine.update_message(turn)
    assert out is turn
    assert out["output"]["text"] == ["Hi!", "{0}"]
    assert len(engine.cart) == 0


def test_turn_fields_are_preserved(engine):
    out = engine.update_message(_turn("order", [("pastry", "muffin")]))
    assert out["context"] == {"conversation_id": "abc"}
    assert out["intents"][0]["intent"] == "order"


def test_orders_before_inventory_load_are_refused():
    engine = OrderEngine()
    out = engine.update_message(_turn("order", [("pastry", "muffin")]))
    assert out["output"]["text"] == [ORDER_REJECTED_MSG]

    engine.load_inventory({"pastry": {"muffin": 1}})
    out = engine.update_message(_turn("order", [("pastry", "muffin")]))
    assert out["output"]["text"] == [ORDER_ACCEPTED_MSG]


def test_concurrent_orders_do_not_oversell():
    engine = OrderEngine(inventory=InventoryStore({"pastry": {"muffin": 50}}))
    results = []

    def worker():
        for _ in range(20):
            results.append(engine.place_order([("pastry", "muffin")]).accepted)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 50
    assert engine.cart.quantity("muffin") == 50
    assert engine.inventory.available("pastry", "muffin") == 0


def test_cart_snapshot(engine):
    engine.place_order([("pastry", "muffin"), ("number", "2")])
    items, summary = engine.cart_snapshot()
    assert items == [{"item": "muffin", "size": None, "milk": None, "flavor": None, "quantity": 2}]
    assert summary == "2 muffins"


def test_size_only_order_is_not_reported_as_added():
    engine = OrderEngine(inventory=InventoryStore({"drink": {"latte": 5}}))
    out = engine.update_message(_turn("order", [("size", "large")]))
    assert out["output"]["text"] == [ORDER_REJECTED_MSG]
    assert len(engine.cart) == 0


def test_zero_quantity_order_asks_again(engine):
    out = engine.update_message(_turn("order", [("drink", "latte"), ("number", "0")]))
    assert out["output"]["text"] == [ORDER_BAD_QUANTITY_MSG]
    assert len(engine.cart) == 0
    assert engine.inventory.available("drink", "latte") == 5
