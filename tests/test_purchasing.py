import os
import sys
from datetime import datetime

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from ctxops import create_app
from ctxops.derived import derive_purchase_status
from ctxops.errors import NotFoundError
from ctxops.extensions import db
from ctxops.models import Purchase, PurchaseItem
from ctxops.services import Services


@pytest.fixture
def app():
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def _purchase_values(**overrides):
    values = {
        "invoice_no": "P-2001",
        "purchase_type": "LOCAL",
        "purchase_date": datetime(2024, 4, 1),
        "seller_name": "Hardware Depot",
        "total_amount": 250.0,
        "item_pickup_status": "not",
        "receipt_status": "not",
        "payment_status": "not",
    }
    values.update(overrides)
    return values


@pytest.mark.parametrize(
    "pickup, receipt, payment, expected",
    [
        ("fully", "fully", "fully", "complete"),
        ("fully", "partially", "fully", "incomplete"),
        ("not", "fully", "fully", "incomplete"),
        (None, "fully", "fully", "incomplete"),
    ],
)
def test_derive_purchase_status(pickup, receipt, payment, expected):
    assert derive_purchase_status(pickup, receipt, payment) == expected


def test_create_ignores_client_status(app):
    purchases = Services(db.session).purchases
    purchase = purchases.create(
        _purchase_values(purchase_status="complete"),
        [
            {
                "item_name": "Drill bits",
                "quantity": 5,
                "unit": "box",
                "unit_price": 40.0,
                "vat": 15.0,
                "total_price": 230.0,
            }
        ],
    )

    assert purchase.purchase_status == "incomplete"
    items = purchases.purchase_items(purchase.id)
    assert [item.item_name for item in items] == ["Drill bits"]


def test_update_merges_tracking_fields(app):
    purchases = Services(db.session).purchases
    purchase = purchases.create(
        _purchase_values(item_pickup_status="fully", receipt_status="fully"), []
    )

    updated = purchases.update(purchase.id, {"payment_status": "fully"})
    assert updated.purchase_status == "complete"

    updated = purchases.update(purchase.id, {"receipt_status": "partially"})
    assert updated.purchase_status == "incomplete"
    assert db.session.get(Purchase, purchase.id).purchase_status == "incomplete"


def test_list_purchases_by_type(app):
    purchases = Services(db.session).purchases
    purchases.create(_purchase_values(), [])
    purchases.create(_purchase_values(invoice_no="P-2002", purchase_type="IMPORTED"), [])

    assert [p.invoice_no for p in purchases.list_purchases("IMPORTED")] == ["P-2002"]
    assert len(purchases.list_purchases()) == 2


def test_delete_removes_items(app):
    purchases = Services(db.session).purchases
    purchase = purchases.create(
        _purchase_values(),
        [
            {
                "item_name": "Gloves",
                "quantity": 10,
                "unit": "pair",
                "unit_price": 2.0,
                "total_price": 20.0,
            }
        ],
    )

    purchase_id = purchase.id
    assert purchases.delete(purchase_id) is True
    assert purchases.delete(purchase_id) is False
    assert db.session.query(PurchaseItem).count() == 0
    with pytest.raises(NotFoundError):
        purchases.get_purchase(purchase_id)
