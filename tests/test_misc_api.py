import uuid
from decimal import Decimal

import pytest

from conftest import make_token

pytestmark = pytest.mark.anyio


async def test_health(client):
    resp = await client.get("/")
    assert resp.json()["status"] == "ok"


async def test_requests_without_valid_token_are_rejected(client):
    assert (await client.get("/customers/")).status_code == 401
    bad = jwt_with_wrong_secret()
    assert (await client.get("/customers/", headers={"Authorization": f"Bearer {bad}"})).status_code == 401
    no_aud = make_token(aud="anon")
    assert (await client.get("/customers/", headers={"Authorization": f"Bearer {no_aud}"})).status_code == 401


def jwt_with_wrong_secret():
    from jose import jwt
    return jwt.encode({"sub": str(uuid.uuid4()), "aud": "authenticated"}, "not-the-secret", algorithm="HS256")


async def test_rows_are_scoped_to_their_owner(client, auth_headers, seed):
    customer = await seed.customer()
    other = {"Authorization": f"Bearer {make_token()}"}

    assert (await client.get(f"/customers/{customer['id']}", headers=other)).status_code == 404
    assert (await client.get("/customers/", headers=other)).json()["total"] == 0


async def test_customer_ledger_balance(client, auth_headers, seed):
    customer = await seed.customer()
    await client.post(
        "/transactions/", json={"customer_id": customer["id"], "type": "udhaar", "amount": 500},
        headers=auth_headers,
    )
    await client.post("/collections/", json={"customer_id": customer["id"], "amount": 200}, headers=auth_headers)

    ledger = (await client.get(f"/customers/{customer['id']}/ledger", headers=auth_headers)).json()["data"]
    assert Decimal(ledger["total_udhaar"]) == Decimal("500")
    assert Decimal(ledger["total_paid"]) == Decimal("200")
    assert Decimal(ledger["balance"]) == Decimal("300")
    assert len(ledger["transactions"]) == 2


async def test_deleted_customer_shows_as_unknown_on_collections(client, auth_headers, seed):
    customer = await seed.customer()
    collection = (await client.post(
        "/collections/", json={"customer_id": customer["id"], "amount": 10}, headers=auth_headers
    )).json()["data"]

    await client.delete(f"/customers/{customer['id']}", headers=auth_headers)
    after = (await client.get(f"/collections/{collection['id']}", headers=auth_headers)).json()["data"]
    assert after["customer_name"] == "Unknown Customer"


async def test_bill_total_in_words(client, auth_headers):
    resp = await client.post(
        "/bills/",
        json={
            "customer_name": "Walk-in",
            "items": [{"name": "Tile", "qty": 3, "price": 250}, {"name": "Cement", "qty": 1, "price": 450.5}],
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    bill = resp.json()["data"]
    assert Decimal(bill["total"]) == Decimal("1200.5")
    assert bill["total_in_words"] == "One Thousand Two Hundred Rupees and Fifty Paise"


async def test_pin_round_trip(client, auth_headers):
    profile = (await client.get("/profile/", headers=auth_headers)).json()["data"]
    assert profile["email"] == "owner@example.com"
    assert profile["has_pin"] is False

    assert (await client.post("/profile/pin/verify", json={"pin": "1234"}, headers=auth_headers)).status_code == 404

    resp = await client.put("/profile/pin", json={"pin": "4821"}, headers=auth_headers)
    assert resp.json()["data"]["has_pin"] is True

    good = await client.post("/profile/pin/verify", json={"pin": "4821"}, headers=auth_headers)
    assert good.json()["valid"] is True
    wrong = await client.post("/profile/pin/verify", json={"pin": "0000"}, headers=auth_headers)
    assert wrong.json()["valid"] is False

    assert (await client.put("/profile/pin", json={"pin": "12ab"}, headers=auth_headers)).status_code == 422


async def test_activity_log_is_admin_only(client, auth_headers, seed, user_id):
    await seed.customer()

    assert (await client.get("/activities/", headers=auth_headers)).status_code == 403

    admin = {"Authorization": f"Bearer {make_token(role='admin')}"}
    resp = await client.get("/activities/", params={"user_id": str(user_id)}, headers=admin)
    assert resp.status_code == 200
    messages = [a["message"] for a in resp.json()["data"]]
    assert "Performed POST on /customers/" in messages
    assert any(m.startswith("Created customer") for m in messages)
