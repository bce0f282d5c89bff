"""Integration tests for transaction, card and category endpoints"""

from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from finplanner.infrastructure.database.repositories import TransactionRepository


def purchase_payload(**kwargs) -> dict:
    payload = {
        "date": "2024-01-31",
        "description": "Geladeira",
        "category": "Moradia",
        "type": "expense",
        "value": "1000.00",
        "payment_method": "Cartão de Crédito",
    }
    payload.update(kwargs)
    return payload


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, headers):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/transactions", json=purchase_payload(), headers=headers)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finplanner_writes_total" in response.text


def test_missing_identity_is_rejected(client: TestClient):
    response = client.get("/v1/transactions")
    assert response.status_code == 401


def test_request_id_is_echoed(client: TestClient, headers):
    response = client.get("/v1/transactions", headers={**headers, "X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_create_single_transaction(client: TestClient, headers):
    response = client.post(
        "/v1/transactions",
        json={"date": "2024-03-05", "description": "Salário", "category": "Trabalho", "type": "income", "value": "5000"},
        headers=headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert len(data["transactions"]) == 1
    txn = data["transactions"][0]
    assert Decimal(txn["value"]) == Decimal("5000")
    assert txn["icon"] == "payments"
    assert txn["installments"] is None
    assert data["dividend"] is None


def test_create_installment_purchase(client: TestClient, headers, card):
    """Test R$ 1000 in 3x on Jan 31 becomes three monthly records"""
    response = client.post(
        "/v1/transactions",
        json=purchase_payload(total_installments=3, card_id=card["id"]),
        headers=headers,
    )

    assert response.status_code == 201
    txns = response.json()["transactions"]
    assert [Decimal(t["value"]) for t in txns] == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
    assert [t["date"] for t in txns] == ["2024-01-31", "2024-03-02", "2024-03-31"]
    assert [t["installment_number"] for t in txns] == [1, 2, 3]
    assert all(t["installments"] == "3x" for t in txns)
    assert all(t["card_id"] == card["id"] and t["card_brand"] == "Nubank" for t in txns)


def test_installments_rejected_for_income(client: TestClient, headers):
    response = client.post(
        "/v1/transactions",
        json=purchase_payload(type="income", total_installments=2),
        headers=headers,
    )

    assert response.status_code == 422
    assert client.get("/v1/transactions", headers=headers).json()["transactions"] == []


def test_list_transactions_by_month(client: TestClient, headers):
    client.post("/v1/transactions", json=purchase_payload(total_installments=3), headers=headers)

    march = client.get("/v1/transactions", params={"year": 2024, "month": 3}, headers=headers).json()
    everything = client.get("/v1/transactions", headers=headers).json()

    assert [t["date"] for t in march["transactions"]] == ["2024-03-31", "2024-03-02"]
    assert len(everything["transactions"]) == 3


def test_transactions_are_scoped_to_user(client: TestClient, headers, other_headers):
    created = client.post("/v1/transactions", json=purchase_payload(), headers=headers).json()
    txn_id = created["transactions"][0]["id"]

    assert client.get("/v1/transactions", headers=other_headers).json()["transactions"] == []
    assert client.delete(f"/v1/transactions/{txn_id}", headers=other_headers).status_code == 404


def test_update_transaction_keeps_installment_fields(client: TestClient, headers):
    created = client.post("/v1/transactions", json=purchase_payload(total_installments=2), headers=headers).json()
    second = created["transactions"][1]

    response = client.put(
        f"/v1/transactions/{second['id']}",
        json=purchase_payload(date=second["date"], description="Geladeira nova", value="510.00"),
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["description"] == "Geladeira nova"
    assert Decimal(data["value"]) == Decimal("510.00")
    assert data["installment_number"] == 2
    assert data["total_installments"] == 2


def test_delete_transaction(client: TestClient, headers):
    created = client.post("/v1/transactions", json=purchase_payload(), headers=headers).json()
    txn_id = created["transactions"][0]["id"]

    assert client.delete(f"/v1/transactions/{txn_id}", headers=headers).status_code == 204
    assert client.delete(f"/v1/transactions/{txn_id}", headers=headers).status_code == 404


def test_malformed_id_is_bad_request(client: TestClient, headers):
    assert client.delete("/v1/transactions/not-a-uuid", headers=headers).status_code == 400


def test_unknown_card_is_not_found(client: TestClient, headers):
    response = client.post(
        "/v1/transactions",
        json=purchase_payload(card_id="0b7c0bd6-6a9f-4a55-8f8e-8f3f5a4d1c11"),
        headers=headers,
    )
    assert response.status_code == 404


def test_pay_bill_creates_payment_expense(client: TestClient, headers, card):
    client.post("/v1/transactions", json=purchase_payload(card_id=card["id"]), headers=headers)

    response = client.post(
        "/v1/bills/pay",
        json={"card_id": card["id"], "amount": "1000.00", "date": "2024-02-10"},
        headers=headers,
    )

    assert response.status_code == 201
    payment = response.json()
    assert payment["description"] == "Pagamento fatura Nubank"
    assert payment["category"] == "Pagamentos"
    assert payment["type"] == "expense"
    assert payment["is_bill_payment"] is True
    assert payment["bill_card_brand"] == "Nubank"
    assert len(client.get("/v1/transactions", headers=headers).json()["transactions"]) == 2


def test_card_crud(client: TestClient, headers, card):
    response = client.put(
        f"/v1/cards/{card['id']}",
        json={"name": "Nubank Ultravioleta", "closing_day": 3},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["closing_day"] == 3

    cards = client.get("/v1/cards", headers=headers).json()["cards"]
    assert [c["name"] for c in cards] == ["Nubank Ultravioleta"]

    assert client.delete(f"/v1/cards/{card['id']}", headers=headers).status_code == 204
    assert client.get("/v1/cards", headers=headers).json()["cards"] == []


def test_card_closing_day_validation(client: TestClient, headers):
    response = client.post("/v1/cards", json={"name": "Inter", "closing_day": 32}, headers=headers)
    assert response.status_code == 422


def test_categories(client: TestClient, headers):
    created = client.post(
        "/v1/categories",
        json={"name": "Pets", "icon": "pets", "type": "expense"},
        headers=headers,
    )
    assert created.status_code == 201

    categories = client.get("/v1/categories", headers=headers).json()["categories"]
    assert categories[0]["name"] == "Alimentação"
    assert categories[0]["system"] is True
    assert categories[-1]["name"] == "Pets"
    assert categories[-1]["system"] is False

    assert client.delete("/v1/categories/1", headers=headers).status_code == 422
    assert client.delete(f"/v1/categories/{created.json()['id']}", headers=headers).status_code == 204


def test_monthly_summary(client: TestClient, headers):
    client.post(
        "/v1/transactions",
        json={"date": "2024-03-05", "description": "Salário", "category": "Trabalho", "type": "income", "value": "5000"},
        headers=headers,
    )
    client.post("/v1/transactions", json=purchase_payload(date="2024-03-10", value="1200"), headers=headers)

    response = client.get("/v1/summary", params={"year": 2024, "month": 3}, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["income"]) == Decimal("5000")
    assert Decimal(data["expense"]) == Decimal("1200")
    assert Decimal(data["balance"]) == Decimal("3800")
    assert Decimal(data["expenses_by_category"]["Moradia"]) == Decimal("1200")


def test_installment_batch_is_all_or_nothing(client: TestClient, headers, monkeypatch):
    """Test a storage failure mid-batch rolls back every installment"""
    original_create_batch = TransactionRepository.create_batch

    def failing_create_batch(self, user_id, txns):
        original_create_batch(self, user_id, txns[:1])
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(TransactionRepository, "create_batch", failing_create_batch)

    response = client.post("/v1/transactions", json=purchase_payload(total_installments=3), headers=headers)

    assert response.status_code == 500
    assert client.get("/v1/transactions", headers=headers).json()["transactions"] == []
