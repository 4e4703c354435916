"""Integration tests: Bill lifecycle endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.models.billing import Bill
from app.models.enums import BillStatus, ConnectionType


async def insert_bill(db_session, owner_id: str, meter_number: str, created_at: datetime, **overrides) -> Bill:
    fields = dict(
        owner_id=uuid.UUID(owner_id),
        consumer_name="Asha Verma",
        meter_number=meter_number,
        connection_type=ConnectionType.DOMESTIC,
        units_consumed=100,
        amount=Decimal("350.00"),
        status=BillStatus.NOT_PAID,
        created_at=created_at,
        updated_at=created_at,
    )
    fields.update(overrides)
    bill = Bill(**fields)
    db_session.add(bill)
    await db_session.commit()
    return bill


# ---------------------------------------------------------------------------
# Generate
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_generate_bill(async_client: AsyncClient, api_base: str, registered_user: dict):
    resp = await async_client.post(
        f"{api_base}/bills",
        headers=registered_user["headers"],
        json={
            "consumer_name": " Asha Verma ",
            "meter_number": "MTR-1001",
            "connection_type": "Domestic",
            "units_consumed": "150",
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["consumer_name"] == "Asha Verma"
    assert data["connection_type"] == "domestic"
    assert data["units_consumed"] == 150
    assert Decimal(str(data["amount"])) == Decimal("575.00")
    assert data["status"] == "Not Paid"
    assert data["owner_id"] == registered_user["user_id"]

    fetched = await async_client.get(f"{api_base}/bills/{data['bill_id']}", headers=registered_user["headers"])
    assert fetched.status_code == 200
    assert fetched.json()["data"]["bill_id"] == data["bill_id"]
    assert Decimal(str(fetched.json()["data"]["amount"])) == Decimal("575.00")


@pytest.mark.asyncio
async def test_generate_bill_zero_units(create_bill, registered_user: dict):
    bill = await create_bill(registered_user["headers"], units_consumed=0, connection_type="commercial")
    assert Decimal(str(bill["amount"])) == Decimal("0")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"units_consumed": -5}, "units_consumed"),
        ({"units_consumed": "abc"}, "units_consumed"),
        ({"units_consumed": 12.5}, "units_consumed"),
        ({"units_consumed": None}, "units_consumed"),
        ({"units_consumed": True}, "units_consumed"),
        ({"units_consumed": 3000000000}, "units_consumed"),
        ({"consumer_name": "  "}, "consumer_name"),
        ({"meter_number": ""}, "meter_number"),
        ({"connection_type": "agricultural"}, "connection_type"),
    ],
)
async def test_generate_bill_validation(
    async_client: AsyncClient, api_base: str, registered_user: dict, overrides: dict, field: str
):
    payload = {
        "consumer_name": "Asha Verma",
        "meter_number": "MTR-1001",
        "connection_type": "domestic",
        "units_consumed": 150,
    }
    payload.update(overrides)
    resp = await async_client.post(f"{api_base}/bills", headers=registered_user["headers"], json=payload)
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["field"] == field

    listing = await async_client.get(f"{api_base}/bills", headers=registered_user["headers"])
    assert listing.json()["data"] == []


@pytest.mark.asyncio
async def test_bills_require_auth(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/bills")
    assert resp.status_code in (401, 403)


# ---------------------------------------------------------------------------
# List / search
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_bills_newest_first(
    async_client: AsyncClient, api_base: str, registered_user: dict, db_session
):
    owner = registered_user["user_id"]
    await insert_bill(db_session, owner, "M-1", datetime(2026, 1, 1))
    await insert_bill(db_session, owner, "M-2", datetime(2026, 3, 1))
    await insert_bill(db_session, owner, "M-3", datetime(2026, 2, 1))

    resp = await async_client.get(f"{api_base}/bills", headers=registered_user["headers"])
    assert resp.status_code == 200
    assert [b["meter_number"] for b in resp.json()["data"]] == ["M-2", "M-3", "M-1"]


@pytest.mark.asyncio
async def test_list_bills_same_timestamp_order_is_stable(
    async_client: AsyncClient, api_base: str, registered_user: dict, db_session
):
    owner = registered_user["user_id"]
    same_time = datetime(2026, 5, 1, 12, 0)
    bills = [await insert_bill(db_session, owner, f"M-{i}", same_time) for i in range(4)]
    expected = [str(b.bill_id) for b in sorted(bills, key=lambda b: b.bill_id, reverse=True)]

    for _ in range(2):
        resp = await async_client.get(f"{api_base}/bills", headers=registered_user["headers"])
        assert [b["bill_id"] for b in resp.json()["data"]] == expected


@pytest.mark.asyncio
async def test_list_bills_filters(create_bill, async_client: AsyncClient, api_base: str, registered_user: dict):
    headers = registered_user["headers"]
    asha = await create_bill(headers, consumer_name="Asha Verma", meter_number="MTR-1001")
    await create_bill(headers, consumer_name="Ravi Kumar", meter_number="MTR-2002", connection_type="commercial")
    await create_bill(headers, consumer_name="Sunil Rao", meter_number="IND-77", connection_type="industrial")
    await async_client.post(f"{api_base}/bills/{asha['bill_id']}/mark-paid", headers=headers)

    async def names(**params):
        resp = await async_client.get(f"{api_base}/bills", headers=headers, params=params)
        assert resp.status_code == 200
        return sorted(b["consumer_name"] for b in resp.json()["data"])

    assert await names() == ["Asha Verma", "Ravi Kumar", "Sunil Rao"]
    assert await names(search="RAVI") == ["Ravi Kumar"]
    assert await names(search="mtr-") == ["Asha Verma", "Ravi Kumar"]
    assert await names(search="  ") == ["Asha Verma", "Ravi Kumar", "Sunil Rao"]
    assert await names(status="Paid") == ["Asha Verma"]
    assert await names(status="Not Paid") == ["Ravi Kumar", "Sunil Rao"]
    assert await names(connection_type="industrial") == ["Sunil Rao"]
    assert await names(search="mtr", status="Not Paid", connection_type="commercial") == ["Ravi Kumar"]
    assert await names(search="nobody") == []


@pytest.mark.asyncio
async def test_list_bills_search_treats_wildcards_literally(
    create_bill, async_client: AsyncClient, api_base: str, registered_user: dict
):
    await create_bill(registered_user["headers"], meter_number="MTR_1")
    await create_bill(registered_user["headers"], meter_number="MTRX1")

    resp = await async_client.get(f"{api_base}/bills", headers=registered_user["headers"], params={"search": "r_1"})
    assert [b["meter_number"] for b in resp.json()["data"]] == ["MTR_1"]


@pytest.mark.asyncio
async def test_list_bills_invalid_status_filter(async_client: AsyncClient, api_base: str, registered_user: dict):
    resp = await async_client.get(
        f"{api_base}/bills", headers=registered_user["headers"], params={"status": "Overdue"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_find_by_meter(async_client: AsyncClient, api_base: str, registered_user: dict, other_user: dict, db_session):
    owner = registered_user["user_id"]
    await insert_bill(db_session, owner, "MTR-5", datetime(2026, 1, 1), units_consumed=10)
    await insert_bill(db_session, owner, "MTR-5", datetime(2026, 2, 1), units_consumed=20)
    await insert_bill(db_session, owner, "MTR-50", datetime(2026, 3, 1))
    await insert_bill(db_session, other_user["user_id"], "MTR-5", datetime(2026, 4, 1))

    resp = await async_client.get(
        f"{api_base}/bills/search", headers=registered_user["headers"], params={"meter_number": " MTR-5 "}
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [b["units_consumed"] for b in data] == [20, 10]
    assert all(b["owner_id"] == owner for b in data)


@pytest.mark.asyncio
async def test_find_by_meter_no_match(async_client: AsyncClient, api_base: str, registered_user: dict):
    resp = await async_client.get(
        f"{api_base}/bills/search", headers=registered_user["headers"], params={"meter_number": "NOPE"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"] == []
    assert body["message"] == "No bills found for this meter number"


@pytest.mark.asyncio
async def test_find_by_meter_blank(async_client: AsyncClient, api_base: str, registered_user: dict):
    resp = await async_client.get(
        f"{api_base}/bills/search", headers=registered_user["headers"], params={"meter_number": "   "}
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["field"] == "meter_number"


# ---------------------------------------------------------------------------
# Mark paid / delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_mark_paid_is_idempotent(create_bill, async_client: AsyncClient, api_base: str, registered_user: dict):
    headers = registered_user["headers"]
    bill = await create_bill(headers)

    first = await async_client.post(f"{api_base}/bills/{bill['bill_id']}/mark-paid", headers=headers)
    assert first.status_code == 200
    assert first.json()["data"]["status"] == "Paid"
    assert Decimal(str(first.json()["data"]["amount"])) == Decimal(str(bill["amount"]))

    second = await async_client.post(f"{api_base}/bills/{bill['bill_id']}/mark-paid", headers=headers)
    assert second.status_code == 200
    assert second.json()["data"]["status"] == "Paid"
    assert second.json()["data"]["updated_at"] == first.json()["data"]["updated_at"]


@pytest.mark.asyncio
async def test_mark_paid_unknown_bill(async_client: AsyncClient, api_base: str, registered_user: dict):
    resp = await async_client.post(f"{api_base}/bills/{uuid.uuid4()}/mark-paid", headers=registered_user["headers"])
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_bill(create_bill, async_client: AsyncClient, api_base: str, registered_user: dict):
    headers = registered_user["headers"]
    bill = await create_bill(headers)

    resp = await async_client.delete(f"{api_base}/bills/{bill['bill_id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    again = await async_client.delete(f"{api_base}/bills/{bill['bill_id']}", headers=headers)
    assert again.status_code == 404

    fetched = await async_client.get(f"{api_base}/bills/{bill['bill_id']}", headers=headers)
    assert fetched.status_code == 404


@pytest.mark.asyncio
async def test_bills_are_scoped_to_owner(
    create_bill, async_client: AsyncClient, api_base: str, registered_user: dict, other_user: dict
):
    bill = await create_bill(registered_user["headers"])
    bill_url = f"{api_base}/bills/{bill['bill_id']}"

    assert (await async_client.get(bill_url, headers=other_user["headers"])).status_code == 404
    assert (await async_client.post(f"{bill_url}/mark-paid", headers=other_user["headers"])).status_code == 404
    assert (await async_client.delete(bill_url, headers=other_user["headers"])).status_code == 404

    listing = await async_client.get(f"{api_base}/bills", headers=other_user["headers"])
    assert listing.json()["data"] == []

    mine = await async_client.get(bill_url, headers=registered_user["headers"])
    assert mine.json()["data"]["status"] == "Not Paid"


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_stats(create_bill, async_client: AsyncClient, api_base: str, registered_user: dict):
    headers = registered_user["headers"]

    empty = await async_client.get(f"{api_base}/bills/stats", headers=headers)
    assert empty.status_code == 200
    assert empty.json()["data"]["total_bills"] == 0
    assert Decimal(str(empty.json()["data"]["total_amount"])) == Decimal("0")

    first = await create_bill(headers, units_consumed=150)
    await create_bill(headers, units_consumed=50, connection_type="industrial")
    await async_client.post(f"{api_base}/bills/{first['bill_id']}/mark-paid", headers=headers)

    resp = await async_client.get(f"{api_base}/bills/stats", headers=headers)
    stats = resp.json()["data"]
    assert stats["total_bills"] == 2
    assert stats["paid_bills"] == 1
    assert stats["unpaid_bills"] == 1
    assert Decimal(str(stats["total_amount"])) == Decimal("975.00")
