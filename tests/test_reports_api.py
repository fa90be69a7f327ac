from datetime import date, timedelta
from decimal import Decimal

import pytest

pytestmark = pytest.mark.anyio


async def test_summary_splits_sales_and_credit(client, auth_headers, seed):
    customer = await seed.customer()
    product = await seed.product(price=100)
    today = date.today()

    # settled today: counts as a sale
    settled = await seed.order(customer["id"], [(product["id"], 2)], advance=200, job_date=today.isoformat())
    await seed.deliver(settled["id"])

    # delivered with credit left: counts as udhaar, not as a sale
    credit = await seed.order(customer["id"], [(product["id"], 3)], advance=100, job_date=today.isoformat())
    await seed.deliver(credit["id"])
    await client.post(
        "/collections/", json={"customer_id": customer["id"], "order_id": credit["id"], "amount": 50},
        headers=auth_headers,
    )

    # settled long ago: only in the all-time total
    old = await seed.order(
        customer["id"], [(product["id"], 1)], advance=100, job_date=(today - timedelta(days=400)).isoformat()
    )
    await seed.deliver(old["id"])

    await seed.order(customer["id"], [(product["id"], 1)], job_date=today.isoformat())

    resp = await client.get("/reports/summary", headers=auth_headers)
    assert resp.status_code == 200
    summary = resp.json()["data"]
    assert Decimal(summary["total_sales"]) == Decimal("300")
    assert Decimal(summary["day_sales"]) == Decimal("200")
    assert Decimal(summary["week_sales"]) == Decimal("200")
    assert Decimal(summary["month_sales"]) == Decimal("200")
    assert Decimal(summary["total_credit"]) == Decimal("150")
    assert summary["orders_pending"] == 1
