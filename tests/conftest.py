import pytest

from cafechat.ordering.brain import OrderEngine
from cafechat.ordering.inventory import InventoryStore


@pytest.fixture()
def inventory():
    return InventoryStore(
        {
            "coffee": {"espresso": True, "coffee": True, "latte": 5},
            "drink": {"latte": 5, "tea": True},
            "milk": {"skim": True, "oat": 2},
            "flavor": {"vanilla": 10},
            "pastry": {"muffin": 4, "scone": 1},
        }
    )


@pytest.fixture()
def engine(inventory):
    return OrderEngine(inventory=inventory)
