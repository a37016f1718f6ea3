import os
import sys
from datetime import datetime

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from ctxops.errors import ValidationError
from ctxops.schemas import INVENTORY_FIELDS, TRANSFER_ITEM_FIELDS
from ctxops.validation import (
    parse_datetime,
    parse_int,
    parse_lines,
    parse_number,
    parse_payload,
)


def _inventory_payload(**overrides):
    payload = {
        "productId": "ITM-0001",
        "category": "Fasteners",
        "itemName": "Bolt",
        "quantity": "12.5",
        "unit": "pcs",
        "unitPrice": 0.25,
        "warehouseId": "1",
    }
    payload.update(overrides)
    return payload


def test_payload_maps_camel_case_to_attributes():
    values = parse_payload(INVENTORY_FIELDS, _inventory_payload())

    assert values["product_id"] == "ITM-0001"
    assert values["quantity"] == 12.5
    assert values["warehouse_id"] == 1
    assert "min_stock" not in values


def test_missing_required_field():
    payload = _inventory_payload()
    del payload["itemName"]

    with pytest.raises(ValidationError) as excinfo:
        parse_payload(INVENTORY_FIELDS, payload)
    assert excinfo.value.message == "itemName: Required"


def test_partial_payload_keeps_only_given_fields():
    values = parse_payload(INVENTORY_FIELDS, {"minStock": 4}, partial=True)
    assert values == {"min_stock": 4.0}


def test_non_object_body_rejected():
    with pytest.raises(ValidationError):
        parse_payload(INVENTORY_FIELDS, ["not", "an", "object"])


def test_line_errors_name_the_index():
    with pytest.raises(ValidationError) as excinfo:
        parse_lines(
            TRANSFER_ITEM_FIELDS,
            [{"inventoryId": 1, "quantity": 2}, {"inventoryId": 2, "quantity": 0}],
        )
    assert excinfo.value.message.startswith("items[1].quantity:")


@pytest.mark.parametrize("raw", [True, "abc", float("nan"), float("inf"), None, ""])
def test_parse_number_rejects(raw):
    with pytest.raises(ValueError):
        parse_number(raw)


def test_parse_int():
    assert parse_int("7") == 7
    assert parse_int(3.0) == 3
    with pytest.raises(ValueError):
        parse_int(2.5)


def test_parse_datetime_normalises_to_naive_utc():
    assert parse_datetime("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, 0)
    assert parse_datetime("2024-05-01T12:00:00+02:00") == datetime(2024, 5, 1, 10, 0)
    assert parse_datetime("2024-05-01") == datetime(2024, 5, 1)
    with pytest.raises(ValueError):
        parse_datetime("yesterday")


def test_null_rejected_on_non_nullable_choice():
    from ctxops.schemas import PURCHASE_FIELDS, SALE_FIELDS

    with pytest.raises(ValidationError) as excinfo:
        parse_payload(PURCHASE_FIELDS, {"receiptStatus": None}, partial=True)
    assert excinfo.value.message == "receiptStatus: Must not be null."

    assert parse_payload(SALE_FIELDS, {"paymentMethod": None}, partial=True) == {
        "payment_method": None
    }
