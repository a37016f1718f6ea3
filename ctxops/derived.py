"""Derived fields recomputed from current values, never stored as flags."""

from __future__ import annotations

PURCHASE_COMPLETE = "complete"
PURCHASE_INCOMPLETE = "incomplete"
FULLY = "fully"


def is_low_stock(quantity: float | None, min_stock: float | None) -> bool:
    if min_stock is None:
        return False
    return (quantity or 0) <= min_stock


def derive_purchase_status(
    item_pickup_status: str | None,
    receipt_status: str | None,
    payment_status: str | None,
) -> str:
    if item_pickup_status == FULLY and receipt_status == FULLY and payment_status == FULLY:
        return PURCHASE_COMPLETE
    return PURCHASE_INCOMPLETE
