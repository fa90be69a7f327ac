from decimal import Decimal

import pytest

pytestmark = pytest.mark.anyio


async def _quotation(client, auth_headers, seed, price=75, qty=4):
    customer = await seed.customer()
    product = await seed.product("Marble", price=price)
    resp = await client.post(
        "/quotations/",
        json={
            "customer_id": customer["id"],
            "product_id": product["id"],
            "qty": qty,
            "job_date": "2026-11-05",
            "site_address": "12 MG Road",
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def test_quotation_is_valued_like_an_order(client, auth_headers, seed):
    quotation = await _quotation(client, auth_headers, seed)
    assert Decimal(quotation["total"]) == Decimal("300")
    assert quotation["product_name"] == "Marble"
    assert quotation["status"] == "pending"
    assert quotation["converted_to_order"] is False


async def test_convert_approved_quotation(client, auth_headers, seed):
    quotation = await _quotation(client, auth_headers, seed)
    url = f"/quotations/{quotation['id']}"

    early = await client.post(f"{url}/convert", json={"advance_amount": 100}, headers=auth_headers)
    assert early.status_code == 400

    approved = await client.post(f"{url}/approve", headers=auth_headers)
    assert approved.json()["data"]["status"] == "approved"

    too_much = await client.post(f"{url}/convert", json={"advance_amount": 301}, headers=auth_headers)
    assert too_much.status_code == 400

    resp = await client.post(f"{url}/convert", json={"advance_amount": 100}, headers=auth_headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["quotation"]["converted_to_order"] is True
    order = body["order"]
    assert order["status"] == "pending"
    assert order["customer_id"] == quotation["customer_id"]
    assert order["site_address"] == "12 MG Road"
    assert Decimal(order["balance"]["total"]) == Decimal("300")
    assert Decimal(order["balance"]["pending"]) == Decimal("200")
    assert Decimal(order["balance"]["collected"]) == Decimal("0")

    twice = await client.post(f"{url}/convert", json={"advance_amount": 0}, headers=auth_headers)
    assert twice.status_code == 409


async def test_status_changes_only_from_pending(client, auth_headers, seed):
    quotation = await _quotation(client, auth_headers, seed)
    url = f"/quotations/{quotation['id']}"

    assert (await client.post(f"{url}/reject", headers=auth_headers)).status_code == 200
    assert (await client.post(f"{url}/approve", headers=auth_headers)).status_code == 409
    assert (await client.put(url, json={"qty": 2}, headers=auth_headers)).status_code == 400

    rejected = (await client.get("/quotations/", params={"status": "rejected"}, headers=auth_headers)).json()
    assert rejected["total"] == 1


async def test_absurd_quotation_quantity_is_rejected(client, auth_headers, seed):
    customer = await seed.customer()
    product = await seed.product()
    resp = await client.post(
        "/quotations/",
        json={"customer_id": customer["id"], "product_id": product["id"], "qty": 10**27, "job_date": "2026-11-05"},
        headers=auth_headers,
    )
    assert resp.status_code == 422
