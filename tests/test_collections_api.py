from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select

from khata.models.collection_models import Collection, Transaction
from khata.services import collection_service

pytestmark = pytest.mark.anyio


async def _delivered_order(seed, customer, product, qty=2, advance=0):
    order = await seed.order(customer["id"], [(product["id"], qty)], advance=advance)
    return await seed.deliver(order["id"])


async def test_collection_creates_paired_paid_transaction(client, auth_headers, seed):
    customer = await seed.customer()
    product = await seed.product(price=100)
    order = await _delivered_order(seed, customer, product, qty=2)

    resp = await client.post(
        "/collections/",
        json={"customer_id": customer["id"], "order_id": order["id"], "amount": 80, "remarks": "cash"},
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    collection = body["data"]
    assert body["warning"] is None
    assert collection["customer_name"] == "Ramesh"
    assert collection["collection_date"] == (date.today() + timedelta(days=1)).isoformat()
    assert collection["transaction_id"] is not None

    txns = (await client.get(
        "/transactions/", params={"customer_id": customer["id"]}, headers=auth_headers
    )).json()["data"]
    assert len(txns) == 1
    assert txns[0]["id"] == collection["transaction_id"]
    assert txns[0]["type"] == "paid"
    assert Decimal(txns[0]["amount"]) == Decimal("80")
    assert txns[0]["note"] == "cash"
    assert txns[0]["collection_id"] == collection["id"]

    order_after = (await client.get(f"/orders/{order['id']}", headers=auth_headers)).json()["data"]
    assert Decimal(order_after["balance"]["collected"]) == Decimal("80")
    assert Decimal(order_after["balance"]["udhaar"]) == Decimal("120")


async def test_failed_write_leaves_neither_row(client, auth_headers, seed, db, monkeypatch):
    customer = await seed.customer()

    async def broken_log(*args, **kwargs):
        raise SQLAlchemyError("audit table unavailable")

    monkeypatch.setattr(collection_service, "log_user_activity", broken_log)

    resp = await client.post(
        "/collections/", json={"customer_id": customer["id"], "amount": 50}, headers=auth_headers
    )
    assert resp.status_code == 500

    assert (await db.execute(select(Collection))).scalars().all() == []
    assert (await db.execute(select(Transaction))).scalars().all() == []


async def test_overcollection_warns_but_saves(client, auth_headers, seed):
    customer = await seed.customer()
    product = await seed.product(price=100)
    order = await _delivered_order(seed, customer, product, qty=1, advance=40)

    resp = await client.post(
        "/collections/",
        json={"customer_id": customer["id"], "order_id": order["id"], "amount": 100},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert "exceeds" in resp.json()["warning"]

    order_after = (await client.get(f"/orders/{order['id']}", headers=auth_headers)).json()["data"]
    assert Decimal(order_after["balance"]["udhaar"]) == Decimal("0")
    assert order_after["balance"]["bucket"] == "history"


async def test_collection_against_another_customers_order_is_rejected(client, auth_headers, seed):
    owner = await seed.customer("Owner")
    stranger = await seed.customer("Stranger")
    product = await seed.product()
    order = await seed.order(owner["id"], [(product["id"], 1)])

    resp = await client.post(
        "/collections/",
        json={"customer_id": stranger["id"], "order_id": order["id"], "amount": 10},
        headers=auth_headers,
    )
    assert resp.status_code == 400


async def test_collection_for_unknown_customer_is_404(client, auth_headers):
    resp = await client.post(
        "/collections/",
        json={"customer_id": "00000000-0000-0000-0000-000000000001", "amount": 10},
        headers=auth_headers,
    )
    assert resp.status_code == 404


async def test_editing_amount_leaves_transaction_untouched(client, auth_headers, seed):
    customer = await seed.customer()
    created = (await client.post(
        "/collections/", json={"customer_id": customer["id"], "amount": 60}, headers=auth_headers
    )).json()["data"]

    resp = await client.put(f"/collections/{created['id']}", json={"amount": 90}, headers=auth_headers)
    assert resp.status_code == 200
    assert Decimal(resp.json()["data"]["amount"]) == Decimal("90")
    assert resp.json()["warning"] == "Linked ledger transaction was not changed"

    txns = (await client.get("/transactions/", headers=auth_headers)).json()["data"]
    assert [Decimal(t["amount"]) for t in txns] == [Decimal("60")]


async def test_deleting_collection_keeps_unlinked_transaction(client, auth_headers, seed):
    customer = await seed.customer()
    created = (await client.post(
        "/collections/", json={"customer_id": customer["id"], "amount": 25}, headers=auth_headers
    )).json()["data"]

    resp = await client.delete(f"/collections/{created['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert (await client.get(f"/collections/{created['id']}", headers=auth_headers)).status_code == 404

    txns = (await client.get("/transactions/", headers=auth_headers)).json()["data"]
    assert len(txns) == 1
    assert txns[0]["collection_id"] is None


async def test_pending_collections_per_customer(client, auth_headers, seed):
    customer = await seed.customer(phone="98765 43210")
    product_a = await seed.product("Tile", price=200)
    product_b = await seed.product("Grout", price=100)
    first = await _delivered_order(seed, customer, product_a, qty=1, advance=50)
    await _delivered_order(seed, customer, product_b, qty=1, advance=25)
    # undelivered orders never show up here
    await seed.order(customer["id"], [(product_a["id"], 3)])

    due = date.today() + timedelta(days=3)
    await client.post(
        "/collections/",
        json={"customer_id": customer["id"], "order_id": first["id"], "amount": 50, "collection_date": due.isoformat()},
        headers=auth_headers,
    )

    resp = await client.get("/collections/pending", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert Decimal(body["total_pending"]) == Decimal("175")
    row = body["data"][0]
    assert row["customer_name"] == "Ramesh"
    assert Decimal(row["pending"]) == Decimal("175")
    assert len(row["order_ids"]) == 2
    assert row["earliest_due_date"] == due.isoformat()
    assert row["due_label"] == "Collection in 3 days"
    assert row["is_urgent"] is False
    assert row["reminder_message"].startswith("Dear Ramesh, your payment of ₹175 is pending.")
    assert row["reminder_link"].startswith("https://wa.me/9876543210?text=")


async def test_preferred_collection_date_moves_due_date(client, auth_headers, seed):
    customer = await seed.customer()
    product = await seed.product(price=100)
    await _delivered_order(seed, customer, product)

    today = date.today()
    resp = await client.put(
        f"/collections/preferences/{customer['id']}",
        json={"preferred_collection_date": today.isoformat()},
        headers=auth_headers,
    )
    assert resp.status_code == 200

    row = (await client.get("/collections/pending", headers=auth_headers)).json()["data"][0]
    assert row["earliest_due_date"] == today.isoformat()
    assert row["due_label"] == "Collection Today"
    assert row["is_urgent"] is True


async def test_collections_list_filters_by_order(client, auth_headers, seed):
    customer = await seed.customer()
    product = await seed.product()
    order = await seed.order(customer["id"], [(product["id"], 5)])
    await client.post(
        "/collections/", json={"customer_id": customer["id"], "order_id": order["id"], "amount": 10},
        headers=auth_headers,
    )
    await client.post("/collections/", json={"customer_id": customer["id"], "amount": 20}, headers=auth_headers)

    all_rows = (await client.get("/collections/", headers=auth_headers)).json()
    assert all_rows["total"] == 2
    linked = (await client.get("/collections/", params={"order_id": order["id"]}, headers=auth_headers)).json()
    assert [Decimal(c["amount"]) for c in linked["data"]] == [Decimal("10")]
