"""HTTP surface: status codes and error bodies."""

from datetime import date


def create_product(client, sku="CS-38-BR", quantity=3, supplier_id=None):
    response = client.post("/api/v1/products", json={
        "name": "Calça Social",
        "supplier_id": supplier_id,
        "variants": [
            {"size": "38", "color": "Branco", "sku": sku, "buy_price": 90, "sale_price": 250, "quantity": quantity},
        ]
    })
    assert response.status_code == 201
    return response.json()


def create_customer(client, phone="11912345678"):
    response = client.post("/api/v1/clients", json={"name": "joana lima", "phone_number": phone})
    assert response.status_code == 201
    return response.json()


def test_root_and_health(client):
    assert client.get("/").json()["api"] == "/api/v1"
    assert client.get("/api/v1/health").json()["status"] == "healthy"


def test_product_conflict_and_not_found(client):
    create_product(client)

    response = client.post("/api/v1/products", json={
        "name": "Duplicada",
        "variants": [{"size": "40", "color": "Preto", "sku": "cs-38-br", "buy_price": 1, "sale_price": 2}]
    })
    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"

    response = client.get("/api/v1/products/9999")
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_client_phone_is_normalized_and_validated(client):
    customer = create_customer(client, phone="(21) 99876-5432")
    assert customer["phone_number"] == "21998765432"
    assert customer["name"] == "Joana Lima"

    assert client.post("/api/v1/clients", json={"name": "X", "phone_number": "123"}).status_code == 422
    duplicate = client.post("/api/v1/clients", json={"name": "Y", "phone_number": "21998765432"})
    assert duplicate.status_code == 409


def test_credit_sale_flow(client):
    supplier = client.post("/api/v1/suppliers", json={
        "name": "Tecidos Norte", "document_number": "11.222.333/0001-81", "contact_person": "Paulo"
    }).json()
    product = create_product(client, supplier_id=supplier["id"])
    customer = create_customer(client)
    variant_id = product["variants"][0]["id"]

    response = client.post("/api/v1/sales", json={
        "customer_id": customer["id"],
        "items": [{"variant_id": variant_id, "quantity": 4}],
        "payments": [{"method": "credit", "installments": 2}],
        "due_date": "2031-01-15"
    })

    assert response.status_code == 201
    sale = response.json()
    # 4 x 250 = 1000, 2x at 5.5% -> 1000 / 0.945
    assert float(sale["total_amount"]) == 1058.20
    assert float(sale["interest_amount"]) == 58.20
    assert sale["fulfillment_status"] == "awaiting_stock"
    assert [item["fulfillment_status"] for item in sale["items"]] == ["pending_stock"]

    receivables = client.get("/api/v1/receivables", params={"customer_id": customer["id"]}).json()
    assert [float(r["amount"]) for r in receivables] == [529.10, 529.10]
    assert [r["due_date"] for r in receivables] == ["2031-01-15", "2031-02-15"]
    assert receivables[0]["customer"]["name"] == "Joana Lima"

    backlog = client.get("/api/v1/purchase-backlog").json()
    assert len(backlog) == 1
    assert backlog[0]["source_sale_id"] == sale["id"]
    assert backlog[0]["supplier_id"] == supplier["id"]
    assert client.get("/api/v1/purchase-backlog", params={"supplier_id": supplier["id"] + 1}).json() == []

    product = client.get(f"/api/v1/products/{product['id']}").json()
    assert product["variants"][0]["quantity"] == -1

    canceled = client.patch(f"/api/v1/sales/{sale['id']}/cancel")
    assert canceled.status_code == 200
    assert canceled.json()["fulfillment_status"] == "canceled"
    assert client.get("/api/v1/receivables").json() == []


def test_sale_errors_map_to_http(client):
    product = create_product(client)
    variant_id = product["variants"][0]["id"]

    response = client.post("/api/v1/sales", json={
        "items": [{"variant_id": variant_id, "quantity": 1}],
        "payments": [{"method": "card", "installments": 7}]
    })
    assert response.status_code == 400
    assert response.json()["kind"] == "business_rule"

    response = client.post("/api/v1/sales", json={"items": [{"variant_id": variant_id, "quantity": 1}]})
    assert response.status_code == 400
    assert response.json()["kind"] == "validation"

    assert client.get("/api/v1/sales/9999").status_code == 404
    assert client.get("/api/v1/sales", params={"fulfillment_status": "lost"}).status_code == 400


def test_summary_endpoint(client):
    product = create_product(client, quantity=10)
    client.post("/api/v1/sales", json={
        "items": [{"variant_id": product["variants"][0]["id"], "quantity": 2}],
        "payments": [{"method": "pix"}]
    })

    summary = client.get("/api/v1/sales/summary").json()
    assert summary["total_sales"] == 1
    assert float(summary["total_revenue"]) == 500.0
    assert summary["awaiting_stock_sales"] == 0


def test_installment_rules_and_conditions(client):
    response = client.post("/api/v1/settings/installment-rules", json={
        "name": "Desde 1000",
        "min_purchase_value": 1000,
        "rules": [{"installments": 1}, {"installments": 6, "interest_rate_percentage": 9}]
    })
    assert response.status_code == 201

    duplicate = client.post("/api/v1/settings/installment-rules", json={
        "min_purchase_value": 1000, "rules": [{"installments": 2}]
    })
    assert duplicate.status_code == 409

    conditions = client.get("/api/v1/installment-conditions", params={"purchase_value": 1000}).json()
    assert [c["installments"] for c in conditions] == [1, 6]

    rules = client.get("/api/v1/settings/installment-rules").json()
    assert [float(r["min_purchase_value"]) for r in rules] == [0.0, 1000.0]

    assert client.delete(f"/api/v1/settings/installment-rules/{response.json()['id']}").status_code == 204


def test_booking_flow(client):
    slots = client.post("/api/v1/availability", json={"slots": [
        {"start_time": "2031-06-02T10:00:00", "end_time": "2031-06-02T11:00:00"},
    ]})
    assert slots.status_code == 201
    slot_id = slots.json()[0]["id"]

    payload = {
        "slot_id": slot_id,
        "client": {"name": "carla dias", "phone_number": "31987654321"},
    }
    first = client.post("/api/v1/appointments", json=payload)
    assert first.status_code == 201
    assert first.json()["client"]["name"] == "Carla Dias"

    second = client.post("/api/v1/appointments", json=payload)
    assert second.status_code == 409
    assert second.json()["kind"] == "conflict"

    assert client.delete(f"/api/v1/availability/{slot_id}").status_code == 400

    days = client.get("/api/v1/availability/days", params={"year": 2031, "month": 6}).json()
    assert days["days"] == []

    client.patch(f"/api/v1/appointments/{first.json()['id']}/cancel")
    days = client.get("/api/v1/availability/days", params={"year": 2031, "month": 6}).json()
    assert days["days"] == [str(date(2031, 6, 2))]

    public = client.get("/api/v1/availability/public", params={"day": "2031-06-02"}).json()
    assert public[0]["is_booked"] is False
    assert "appointment_id" not in public[0]


def test_supplier_lifecycle(client):
    payload = {"name": "Malhas Vale", "document_number": "98.765.432/0001-10", "contact_person": "Lia"}
    created = client.post("/api/v1/suppliers", json=payload)
    assert created.status_code == 201
    supplier_id = created.json()["id"]
    assert created.json()["document_number"] == "98765432000110"

    duplicate = client.post("/api/v1/suppliers", json={**payload, "name": "Outra Malharia"})
    assert duplicate.status_code == 409

    updated = client.put(f"/api/v1/suppliers/{supplier_id}", json={"phone": "4733221100"})
    assert updated.json()["phone"] == "4733221100"

    assert client.delete(f"/api/v1/suppliers/{supplier_id}").status_code == 204
    assert client.get(f"/api/v1/suppliers/{supplier_id}").status_code == 404
    assert client.get("/api/v1/suppliers").json() == []
