import os
import sys

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from ctxops import create_app
from ctxops.extensions import db
from ctxops.models import InventoryItem


@pytest.fixture
def app():
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username="admin", password="change_me"):
    return client.post("/api/login", json={"username": username, "password": password})


def _create_bolt(client, quantity=100, warehouse_id=1, product_id="ITM-0001"):
    response = client.post(
        "/api/inventory",
        json={
            "productId": product_id,
            "category": "Fasteners",
            "itemName": "Bolt",
            "quantity": quantity,
            "unit": "pcs",
            "unitPrice": 0.25,
            "minStock": 20,
            "warehouseId": warehouse_id,
        },
    )
    assert response.status_code == 201
    return response.get_json()


def test_api_requires_login(client):
    for path in ["/api/inventory", "/api/dashboard", "/api/sales", "/api/user"]:
        response = client.get(path)
        assert response.status_code == 401
        assert response.get_json() == {"error": "Unauthorized"}


def test_login_and_whoami(client):
    assert login(client, password="wrong").status_code == 401

    response = login(client)
    assert response.status_code == 200
    assert response.get_json()["username"] == "admin"
    assert "passwordHash" not in response.get_json()

    whoami = client.get("/api/user").get_json()
    assert whoami["role"] == "admin"

    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/inventory").status_code == 401


def test_register_rejects_duplicate_username(client):
    response = client.post("/api/register", json={"username": "dana", "password": "pw"})
    assert response.status_code == 201
    assert response.get_json()["role"] == "user"

    duplicate = client.post("/api/register", json={"username": "dana", "password": "pw"})
    assert duplicate.status_code == 400


def test_seeded_warehouses(client):
    login(client)

    warehouses = client.get("/api/warehouses").get_json()
    assert [(w["id"], w["name"]) for w in warehouses] == [
        (1, "Main Warehouse"),
        (2, "Warehouse B"),
    ]


def test_inventory_validation_and_not_found(client):
    login(client)

    response = client.post("/api/inventory", json={"productId": "X"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "category: Required"

    assert client.post("/api/inventory", data="nope").status_code == 400
    assert client.get("/api/inventory/999").status_code == 404
    assert client.delete("/api/inventory/999").status_code == 404


def test_inventory_filters(client):
    login(client)
    _create_bolt(client, quantity=10)
    _create_bolt(client, quantity=50, warehouse_id=2, product_id="ITM-0002")

    assert len(client.get("/api/inventory").get_json()) == 2
    in_b = client.get("/api/inventory?warehouseId=2").get_json()
    assert [item["productId"] for item in in_b] == ["ITM-0002"]
    low = client.get("/api/inventory?lowStock=true").get_json()
    assert [item["productId"] for item in low] == ["ITM-0001"]
    assert low[0]["lowStock"] is True

    assert client.get("/api/inventory?warehouseId=abc").status_code == 400


def test_inventory_update_and_delete(client):
    login(client)
    bolt = _create_bolt(client)

    response = client.put(f"/api/inventory/{bolt['id']}", json={"minStock": 150})
    assert response.status_code == 200
    assert response.get_json()["lowStock"] is True

    assert client.delete(f"/api/inventory/{bolt['id']}").status_code == 204
    assert client.get(f"/api/inventory/{bolt['id']}").status_code == 404


def test_transfer_endpoint(client, app):
    login(client)
    bolt = _create_bolt(client)

    response = client.post(
        "/api/inventory/transfers",
        json={
            "transfer": {
                "fromWarehouseId": 1,
                "toWarehouseId": 2,
                "transferDate": "2024-05-01T09:30:00Z",
                "reference": "TR-001",
            },
            "items": [{"inventoryId": bolt["id"], "quantity": 30}],
        },
    )
    assert response.status_code == 201
    transfer = response.get_json()
    assert transfer["items"][0]["quantity"] == 30

    assert client.get(f"/api/inventory/{bolt['id']}").get_json()["quantity"] == 70
    destination = client.get("/api/inventory?warehouseId=2").get_json()
    assert destination[0]["productId"] == "ITM-0001-2"
    assert destination[0]["quantity"] == 30

    lines = client.get(f"/api/inventory/transfers/{transfer['id']}/items").get_json()
    assert [line["inventoryId"] for line in lines] == [bolt["id"]]
    assert len(client.get("/api/inventory/transfers").get_json()) == 1


def test_transfer_endpoint_missing_item(client):
    login(client)
    bolt = _create_bolt(client)

    response = client.post(
        "/api/inventory/transfers",
        json={
            "transfer": {
                "fromWarehouseId": 1,
                "toWarehouseId": 2,
                "transferDate": "2024-05-01",
            },
            "items": [
                {"inventoryId": bolt["id"], "quantity": 30},
                {"inventoryId": 999, "quantity": 1},
            ],
        },
    )
    assert response.status_code == 404
    assert response.get_json()["line"] == 1
    assert client.get(f"/api/inventory/{bolt['id']}").get_json()["quantity"] == 100
    assert client.get("/api/inventory/transfers").get_json() == []


def test_transfer_endpoint_lenient():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "STRICT_INVENTORY_REFERENCES": False,
        }
    )
    client = app.test_client()
    login(client)
    bolt = _create_bolt(client)

    response = client.post(
        "/api/inventory/transfers",
        json={
            "transfer": {
                "fromWarehouseId": 1,
                "toWarehouseId": 2,
                "transferDate": "2024-05-01",
            },
            "items": [
                {"inventoryId": 999, "quantity": 1},
                {"inventoryId": bolt["id"], "quantity": 30},
            ],
        },
    )
    assert response.status_code == 201
    assert response.get_json()["skippedLines"] == [0]
    assert client.get(f"/api/inventory/{bolt['id']}").get_json()["quantity"] == 70


def test_transfer_endpoint_rejects_bad_lines(client):
    login(client)

    response = client.post(
        "/api/inventory/transfers",
        json={
            "transfer": {
                "fromWarehouseId": 1,
                "toWarehouseId": 2,
                "transferDate": "2024-05-01",
            },
            "items": [{"inventoryId": 1, "quantity": -5}],
        },
    )
    assert response.status_code == 400
    assert response.get_json()["error"].startswith("items[0].quantity")


def test_item_usage_records_current_user(client, app):
    login(client)
    bolt = _create_bolt(client, quantity=10)

    response = client.post(
        "/api/itemusage",
        json={"inventoryId": bolt["id"], "quantity": 4, "usageDate": "2024-05-03"},
    )
    assert response.status_code == 201
    assert response.get_json()["recordedBy"] == 1
    assert db.session.get(InventoryItem, bolt["id"]).quantity == 6

    usage = client.get(f"/api/itemusage?inventoryId={bolt['id']}").get_json()
    assert len(usage) == 1


def test_sale_endpoint(client):
    login(client)
    bolt = _create_bolt(client, quantity=10)

    response = client.post(
        "/api/sales",
        json={
            "sale": {
                "invoiceNo": "S-1",
                "saleDate": "2024-05-02",
                "customerName": "Acme",
                "subtotal": 1.0,
                "totalAmount": 1.15,
                "paymentStatus": "paid",
                "deliveryRequired": True,
            },
            "items": [
                {
                    "inventoryId": bolt["id"],
                    "quantity": 4,
                    "unitPrice": 0.25,
                    "totalPrice": 1.0,
                }
            ],
        },
    )
    assert response.status_code == 201
    sale = response.get_json()
    assert client.get(f"/api/inventory/{bolt['id']}").get_json()["quantity"] == 6
    assert len(client.get(f"/api/sales/{sale['id']}/items").get_json()) == 1

    stats = client.get("/api/dashboard").get_json()
    assert stats["pendingDeliveries"] == 1

    duplicate = client.post(
        "/api/sales",
        json={
            "sale": {
                "invoiceNo": "S-1",
                "saleDate": "2024-05-02",
                "customerName": "Acme",
                "subtotal": 1.0,
                "totalAmount": 1.15,
                "paymentStatus": "paid",
            },
            "items": [
                {
                    "inventoryId": bolt["id"],
                    "quantity": 1,
                    "unitPrice": 0.25,
                    "totalPrice": 0.25,
                }
            ],
        },
    )
    assert duplicate.status_code == 400
    assert client.get(f"/api/inventory/{bolt['id']}").get_json()["quantity"] == 6


def test_purchase_endpoints(client):
    login(client)

    response = client.post(
        "/api/purchases",
        json={
            "purchase": {
                "invoiceNo": "P-1",
                "purchaseType": "LOCAL",
                "purchaseDate": "2024-04-01",
                "sellerName": "Depot",
                "totalAmount": 100,
                "itemPickupStatus": "fully",
                "receiptStatus": "partially",
                "paymentStatus": "fully",
                "purchaseStatus": "complete",
            },
            "items": [],
        },
    )
    assert response.status_code == 201
    purchase = response.get_json()
    assert purchase["purchaseStatus"] == "incomplete"

    updated = client.put(f"/api/purchases/{purchase['id']}", json={"receiptStatus": "fully"})
    assert updated.get_json()["purchaseStatus"] == "complete"

    bad_type = client.post(
        "/api/purchases",
        json={"purchase": {"purchaseType": "BARTER"}, "items": []},
    )
    assert bad_type.status_code == 400

    assert client.delete(f"/api/purchases/{purchase['id']}").status_code == 204
    assert client.delete(f"/api/purchases/{purchase['id']}").status_code == 404


def test_machinery_and_services(client):
    login(client)

    machine = client.post(
        "/api/machinery", json={"name": "Excavator", "category": "Heavy"}
    ).get_json()
    service = client.post(
        f"/api/machinery/{machine['id']}/services",
        json={"serviceDate": "2024-03-01", "serviceType": "Oil change", "cost": 120},
    )
    assert service.status_code == 201
    assert len(client.get(f"/api/machinery/{machine['id']}/services").get_json()) == 1
    assert client.post(
        "/api/machinery/999/services",
        json={"serviceDate": "2024-03-01", "serviceType": "Oil change"},
    ).status_code == 404

    assert client.get("/api/dashboard").get_json()["totalMachinery"] == 1


def test_documents_require_relation(client):
    login(client)

    created = client.post(
        "/api/documents",
        json={
            "documentType": "PURCHASE_RECEIPT",
            "relatedId": 3,
            "relatedType": "purchase",
            "fileName": "receipt.pdf",
            "filePath": "/uploads/receipt.pdf",
        },
    )
    assert created.status_code == 201
    assert created.get_json()["uploadedBy"] == 1

    assert client.get("/api/documents").status_code == 400
    listed = client.get("/api/documents?relatedId=3&relatedType=purchase").get_json()
    assert [doc["fileName"] for doc in listed] == ["receipt.pdf"]


def test_projects_tasks_and_timesheet(client):
    login(client)

    project = client.post("/api/projects", json={"name": "Depot roof"}).get_json()
    task = client.post(
        f"/api/projects/{project['id']}/tasks",
        json={"title": "Order sheets", "priority": "high"},
    ).get_json()
    assert task["status"] == "pending"

    updated = client.put(f"/api/tasks/{task['id']}/status", json={"status": "completed"})
    assert updated.get_json()["status"] == "completed"
    bad = client.put(f"/api/tasks/{task['id']}/status", json={"status": "done"})
    assert bad.status_code == 400

    entry = client.post(
        "/api/timesheet",
        json={"projectId": project["id"], "workDate": "2024-05-04", "hours": 7.5},
    )
    assert entry.status_code == 201
    assert entry.get_json()["userId"] == 1
    assert len(client.get("/api/timesheet").get_json()) == 1


def _record_sale(client, bolt_id, invoice_no="S-10"):
    response = client.post(
        "/api/sales",
        json={
            "sale": {
                "invoiceNo": invoice_no,
                "saleDate": "2024-05-02",
                "customerName": "Acme",
                "subtotal": 1.0,
                "totalAmount": 1.15,
                "paymentStatus": "credit",
                "paymentMethod": None,
                "deliveryRequired": True,
            },
            "items": [
                {"inventoryId": bolt_id, "quantity": 1, "unitPrice": 1.0, "totalPrice": 1.0}
            ],
        },
    )
    assert response.status_code == 201
    return response.get_json()


def test_delivery_status_update(client):
    login(client)
    bolt = _create_bolt(client)
    sale = _record_sale(client, bolt["id"])
    assert client.get("/api/dashboard").get_json()["pendingDeliveries"] == 1

    response = client.put(
        f"/api/sales/{sale['id']}",
        json={"deliveryStatus": "completed", "deliveryDate": "2024-05-09"},
    )
    assert response.status_code == 200
    assert response.get_json()["deliveryStatus"] == "completed"
    assert response.get_json()["deliveryDate"] == "2024-05-09T00:00:00"
    assert client.get("/api/dashboard").get_json()["pendingDeliveries"] == 0

    assert client.put("/api/sales/999", json={"deliveryStatus": "completed"}).status_code == 404
    assert client.put(f"/api/sales/{sale['id']}", json={"deliveryStatus": "lost"}).status_code == 400
    assert client.put(f"/api/sales/{sale['id']}", json={"deliveryStatus": None}).status_code == 400
    assert client.put(f"/api/sales/{sale['id']}", json={}).status_code == 400


def test_transfer_endpoint_rejects_line_from_other_warehouse(client):
    login(client)
    stray = _create_bolt(client, quantity=50, warehouse_id=2, product_id="WB-BOLT")

    response = client.post(
        "/api/inventory/transfers",
        json={
            "transfer": {
                "fromWarehouseId": 1,
                "toWarehouseId": 2,
                "transferDate": "2024-05-01",
            },
            "items": [{"inventoryId": stray["id"], "quantity": 30}],
        },
    )
    assert response.status_code == 400
    assert response.get_json()["line"] == 0
    assert client.get(f"/api/inventory/{stray['id']}").get_json()["quantity"] == 50
    assert client.get("/api/inventory/transfers").get_json() == []


def test_null_tracking_status_rejected(client):
    login(client)
    purchase = client.post(
        "/api/purchases",
        json={
            "purchase": {
                "invoiceNo": "P-9",
                "purchaseType": "LOCAL",
                "purchaseDate": "2024-04-01",
                "sellerName": "Depot",
                "totalAmount": 10,
            },
            "items": [],
        },
    ).get_json()

    response = client.put(f"/api/purchases/{purchase['id']}", json={"itemPickupStatus": None})
    assert response.status_code == 400
    assert response.get_json()["error"] == "itemPickupStatus: Must not be null."


def test_constraint_errors_do_not_leak_driver_text(client):
    login(client)
    bolt = _create_bolt(client)
    _record_sale(client, bolt["id"], invoice_no="S-DUP")

    response = client.post(
        "/api/sales",
        json={
            "sale": {
                "invoiceNo": "S-DUP",
                "saleDate": "2024-05-02",
                "customerName": "Acme",
                "subtotal": 1.0,
                "totalAmount": 1.15,
                "paymentStatus": "paid",
            },
            "items": [
                {"inventoryId": bolt["id"], "quantity": 1, "unitPrice": 1.0, "totalPrice": 1.0}
            ],
        },
    )
    assert response.status_code == 400
    message = response.get_json()["error"]
    assert "UNIQUE" not in message.upper()
    assert "sales" not in message
