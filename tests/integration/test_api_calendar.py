"""Integration tests for recurring obligations and calendar projections"""

from decimal import Decimal
from fastapi.testclient import TestClient


def rent_payload(**kwargs) -> dict:
    payload = {"description": "Aluguel", "category": "Moradia", "value": "1500.00", "days_of_month": [20, 5]}
    payload.update(kwargs)
    return payload


def card_purchase(card_id: str, day: str, value: str) -> dict:
    return {
        "date": day,
        "description": "Mercado",
        "category": "Alimentação",
        "type": "expense",
        "value": value,
        "payment_method": "Cartão de Crédito",
        "card_id": card_id,
    }


def test_create_recurring_sorts_days(client: TestClient, headers):
    response = client.post("/v1/recurring", json=rent_payload(), headers=headers)

    assert response.status_code == 201
    assert response.json()["days_of_month"] == [5, 20]


def test_create_recurring_from_date_range(client: TestClient, headers):
    """Test a range crossing months contributes days of both months"""
    response = client.post(
        "/v1/recurring",
        json=rent_payload(days_of_month=[7], start_date="2024-01-30", end_date="2024-02-02"),
        headers=headers,
    )

    assert response.status_code == 201
    assert response.json()["days_of_month"] == [1, 2, 30, 31]


def test_create_recurring_without_days_is_rejected(client: TestClient, headers):
    response = client.post("/v1/recurring", json=rent_payload(days_of_month=[]), headers=headers)

    assert response.status_code == 422
    assert client.get("/v1/recurring", headers=headers).json()["obligations"] == []


def test_replace_recurring_overwrites_days(client: TestClient, headers):
    created = client.post("/v1/recurring", json=rent_payload(), headers=headers).json()

    response = client.put(
        f"/v1/recurring/{created['id']}",
        json=rent_payload(value="1600.00", days_of_month=[10]),
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["days_of_month"] == [10]
    assert Decimal(response.json()["value"]) == Decimal("1600.00")


def test_delete_recurring(client: TestClient, headers):
    created = client.post("/v1/recurring", json=rent_payload(), headers=headers).json()

    assert client.delete(f"/v1/recurring/{created['id']}", headers=headers).status_code == 204
    assert client.get("/v1/recurring", headers=headers).json()["obligations"] == []


def test_month_view_february(client: TestClient, headers):
    client.post("/v1/recurring", json=rent_payload(days_of_month=[5, 20, 31]), headers=headers)

    response = client.get("/v1/calendar/month", params={"year": 2024, "month": 2}, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["view"] == "month"
    assert data["start"] == "2024-02-01"
    assert data["end"] == "2024-02-29"
    assert len(data["days"]) == 29
    assert [d["date"] for d in data["days"] if d["obligations"]] == ["2024-02-05", "2024-02-20"]
    assert data["days"][12]["holiday"] == "Carnaval"


def test_month_view_projects_card_bill(client: TestClient, headers, card):
    client.post("/v1/transactions", json=card_purchase(card["id"], "2024-03-02", "50.00"), headers=headers)
    client.post("/v1/transactions", json=card_purchase(card["id"], "2024-03-25", "75.00"), headers=headers)

    data = client.get("/v1/calendar/month", params={"year": 2024, "month": 3}, headers=headers).json()

    bill_days = [d for d in data["days"] if d["bills"]]
    assert [d["date"] for d in bill_days] == ["2024-03-10"]
    bill = bill_days[0]["bills"][0]
    assert bill["card_name"] == "Nubank"
    assert Decimal(bill["amount"]) == Decimal("125.00")


def test_bill_payment_does_not_change_projection(client: TestClient, headers, card):
    client.post("/v1/transactions", json=card_purchase(card["id"], "2024-03-02", "50.00"), headers=headers)
    client.post(
        "/v1/bills/pay",
        json={"card_id": card["id"], "amount": "50.00", "date": "2024-03-10"},
        headers=headers,
    )

    data = client.get("/v1/calendar/month", params={"year": 2024, "month": 3}, headers=headers).json()

    bill = data["days"][9]["bills"][0]
    assert Decimal(bill["amount"]) == Decimal("50.00")


def test_week_view_spans_months(client: TestClient, headers):
    client.post("/v1/recurring", json=rent_payload(days_of_month=[30, 2]), headers=headers)

    data = client.get("/v1/calendar/week", params={"day": "2024-05-01"}, headers=headers).json()

    assert data["start"] == "2024-04-28"
    assert data["end"] == "2024-05-04"
    assert len(data["days"]) == 7
    assert [d["date"] for d in data["days"] if d["obligations"]] == ["2024-04-30", "2024-05-02"]
    assert [d["holiday"] for d in data["days"] if d["holiday"]] == ["Dia do Trabalho"]


def test_day_view(client: TestClient, headers):
    data = client.get("/v1/calendar/day", params={"day": "2024-12-25"}, headers=headers).json()

    assert data["view"] == "day"
    assert len(data["days"]) == 1
    assert data["days"][0]["holiday"] == "Natal"


def test_holidays_endpoint_is_public(client: TestClient):
    response = client.get("/v1/calendar/holidays/2024")

    assert response.status_code == 200
    data = response.json()
    assert data["easter"] == "2024-03-31"
    names = {h["month_day"]: h["name"] for h in data["holidays"]}
    assert names["02-13"] == "Carnaval"
    assert names["03-29"] == "Sexta-feira Santa"
    assert names["05-30"] == "Corpus Christi"
    assert len(names) == 11


def test_week_view_outside_date_range_is_rejected(client: TestClient, headers):
    for day in ("0001-01-01", "9999-12-31"):
        response = client.get("/v1/calendar/week", params={"day": day}, headers=headers)
        assert response.status_code == 422
