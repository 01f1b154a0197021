import pytest
from fastapi.testclient import TestClient

from qrorder.main import create_app
from qrorder.services.floor import Floor
from qrorder.services.table_service import default_table_ids
from tests.helpers import WINDOWS, FrozenClock


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def floor(clock):
    return Floor(
        clock=clock,
        table_ids=default_table_ids(10),
        windows=WINDOWS,
        rollover_hour=3,
        retention_days=2,
    )


@pytest.fixture()
def orders(floor):
    return floor.order_service


@pytest.fixture()
def tables(floor):
    return floor.table_service


@pytest.fixture()
def carts(floor):
    return floor.cart_service


@pytest.fixture()
def client(floor):
    return TestClient(create_app(floor))
