from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from baserow_bindings.client import BaserowClient
from baserow_bindings.errors import (
    LookupCardinalityError,
    MissingIdentifierError,
    TransportError,
)


@pytest.fixture
def client(settings, fake_baserow):
    with BaserowClient.from_settings(settings, transport=fake_baserow.transport) as client:
        yield client


def _order(fake, order_id, **values):
    return fake.add_row(101, field_1001=order_id, **values)


def test_list_follows_page_links(client, fake_baserow, shop_module) -> None:
    for order_id in range(1, 6):
        _order(fake_baserow, str(order_id), field_1002=f"Customer {order_id}")

    orders = client.list(shop_module.Orders, page_size=2)

    assert [o.order_id for o in orders] == [1, 2, 3, 4, 5]
    assert orders[4].customer == "Customer 5"
    pages = fake_baserow.requests_with("GET")
    assert len(pages) == 3
    assert pages[0].url.path == "/api/database/rows/table/101/"
    assert pages[0].url.params["size"] == "2"
    assert pages[2].url.params["page"] == "3"


def test_list_empty_table(client, shop_module) -> None:
    assert client.list(shop_module.Customers) == []


def test_list_rejects_undecodable_rows(client, fake_baserow, shop_module) -> None:
    _order(fake_baserow, "not a number")

    with pytest.raises(ValidationError):
        client.list(shop_module.Orders)


def test_create_posts_writable_fields(client, fake_baserow, shop_module) -> None:
    order = shop_module.Orders(order_id=7, customer="Grace", status="Open", created="ignored")

    created = client.create(order)

    posted = json.loads(fake_baserow.requests_with("POST")[0].content)
    assert posted["field_1001"] == 7
    assert posted["field_1003"] == "Open"
    assert "field_1008" not in posted
    assert created.order_id == 7
    assert created.customer == "Grace"
    assert fake_baserow.rows[101][-1]["field_1002"] == "Grace"


def test_update_patches_the_matching_row(client, fake_baserow, shop_module) -> None:
    _order(fake_baserow, 6)
    row = _order(fake_baserow, 7, field_1002="Grace")

    updated = client.update(shop_module.Orders(order_id=7, customer="Grace Hopper"))

    lookup = fake_baserow.requests_with("GET")[0]
    assert lookup.url.params["filter__field_1001__equal"] == "7"
    patch = fake_baserow.requests_with("PATCH")[0]
    assert patch.url.path == f"/api/database/rows/table/101/{row['id']}/"
    assert row["field_1002"] == "Grace Hopper"
    assert updated.customer == "Grace Hopper"


def test_update_sends_unset_attributes_as_null(client, fake_baserow, shop_module) -> None:
    row = _order(fake_baserow, 7, field_1002="Grace", field_1003="Open")

    client.update(shop_module.Orders(order_id=7, status="Shipped"))

    patched = json.loads(fake_baserow.requests_with("PATCH")[0].content)
    assert patched["field_1002"] is None
    assert row["field_1002"] is None


def test_partial_update_keeps_other_columns(client, fake_baserow, shop_module) -> None:
    row = _order(fake_baserow, 7, field_1002="Grace", field_1003="Open")

    updated = client.update(shop_module.Orders(order_id=7, status="Shipped"), exclude_unset=True)

    patched = json.loads(fake_baserow.requests_with("PATCH")[0].content)
    assert set(patched) == {"field_1001", "field_1003"}
    assert row["field_1002"] == "Grace"
    assert row["field_1003"] == "Shipped"
    assert updated.customer == "Grace"


def test_update_by_text_primary(client, fake_baserow, shop_module) -> None:
    row = fake_baserow.add_row(102, field_1011="Ada", field_1012="ada@old.test")

    client.update(shop_module.Customers(name="Ada", email="ada@new.test"))

    assert row["field_1012"] == "ada@new.test"
    assert fake_baserow.requests_with("GET")[0].url.params["filter__field_1011__equal"] == "Ada"


@pytest.mark.parametrize("matches", [0, 2])
def test_update_requires_exactly_one_match(client, fake_baserow, shop_module, matches: int) -> None:
    for _ in range(matches):
        _order(fake_baserow, 7)

    with pytest.raises(LookupCardinalityError) as exc_info:
        client.update(shop_module.Orders(order_id=7, customer="Nobody"))

    assert exc_info.value.count == matches
    assert exc_info.value.identifier == "7"
    assert exc_info.value.table_id == 101
    assert fake_baserow.requests_with("PATCH") == []
    assert all(row.get("field_1002") is None for row in fake_baserow.rows[101])


def test_update_without_primary_value(client, fake_baserow, shop_module) -> None:
    with pytest.raises(MissingIdentifierError):
        client.update(shop_module.Orders(customer="Nobody"))

    assert fake_baserow.requests == []


def test_http_errors_become_transport_errors(settings, fake_baserow, shop_module) -> None:
    wrong = settings.model_copy(update={"token": "nope"})

    with BaserowClient.from_settings(wrong, transport=fake_baserow.transport) as client:
        with pytest.raises(TransportError) as exc_info:
            client.list(shop_module.Orders)

    assert exc_info.value.operation == "list"
    assert exc_info.value.table_id == 101
    assert "401" in exc_info.value.message
