from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ctxops.models import Purchase, PurchaseItem
from ctxops.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class PurchaseService:
    """Purchases with a ``purchase_status`` derived from the tracking fields."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def list_purchases(self, purchase_type: str | None = None) -> list[Purchase]:
        if purchase_type:
            return self.gateway.purchases.list(Purchase.purchase_type == purchase_type)
        return self.gateway.purchases.list()

    def get_purchase(self, purchase_id: int) -> Purchase:
        return self.gateway.purchases.require(purchase_id)

    def purchase_items(self, purchase_id: int) -> list[PurchaseItem]:
        return self.gateway.purchase_items.list(PurchaseItem.purchase_id == purchase_id)

    def create(
        self,
        values: Mapping[str, Any],
        items: Sequence[Mapping[str, Any]],
    ) -> Purchase:
        values = {key: value for key, value in values.items() if key != "purchase_status"}
        with self.gateway.atomic():
            purchase = Purchase(**values)
            purchase.refresh_purchase_status()
            self.gateway.session.add(purchase)
            self.gateway.session.flush()
            for item in items:
                self.gateway.purchase_items.create(purchase_id=purchase.id, **item)

        logger.info(
            "Created purchase %s (%s) with %s items",
            purchase.invoice_no,
            purchase.purchase_status,
            len(items),
        )
        return purchase

    def update(self, purchase_id: int, changes: Mapping[str, Any]) -> Purchase:
        with self.gateway.atomic():
            purchase = self.gateway.purchases.require(purchase_id)
            for attr, value in changes.items():
                if attr == "purchase_status":
                    continue
                setattr(purchase, attr, value)
            # Merged values: untouched tracking fields keep their stored state.
            purchase.refresh_purchase_status()
            self.gateway.session.flush()
        return purchase

    def delete(self, purchase_id: int) -> bool:
        with self.gateway.atomic():
            deleted = self.gateway.purchases.delete(purchase_id)
        return deleted
