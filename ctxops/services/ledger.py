from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from sqlalchemy import func, select

from ctxops.derived import is_low_stock
from ctxops.errors import ValidationError
from ctxops.models import InventoryItem
from ctxops.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Per-warehouse stock quantities for named inventory items."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway
        self.items = gateway.inventory

    def get_item(self, item_id: int) -> InventoryItem:
        return self.items.require(item_id)

    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        return self.items.first(InventoryItem.product_id == product_id)

    def list_items(self, warehouse_id: int | None = None) -> list[InventoryItem]:
        if warehouse_id is None:
            return self.items.list()
        return self.items.list(InventoryItem.warehouse_id == warehouse_id)

    def list_low_stock(self, warehouse_id: int | None = None) -> list[InventoryItem]:
        return [item for item in self.list_items(warehouse_id) if self.is_low_stock(item)]

    def find_by_name(
        self, item_name: str, warehouse_id: int, *, lock: bool = False
    ) -> InventoryItem | None:
        return self.items.first(
            InventoryItem.item_name == item_name,
            InventoryItem.warehouse_id == warehouse_id,
            lock=lock,
        )

    def total_quantity(self, item_name: str) -> float:
        stmt = select(func.coalesce(func.sum(InventoryItem.quantity), 0)).where(
            InventoryItem.item_name == item_name
        )
        return float(self.gateway.session.execute(stmt).scalar() or 0)

    def adjust_quantity(self, item_id: int, delta: float) -> InventoryItem:
        """Apply ``quantity += delta`` to a locked row; no clamping at zero."""

        item = self.items.require(item_id, lock=True)
        before = item.quantity or 0
        item.quantity = before + delta
        self.gateway.session.flush()
        logger.info(
            "Adjusted inventory %s (%s) in warehouse %s: %s -> %s",
            item.id,
            item.product_id,
            item.warehouse_id,
            before,
            item.quantity,
        )
        return item

    def lock_statement(self, item_ids: Iterable[int]):
        return (
            select(InventoryItem)
            .where(InventoryItem.id.in_(sorted(set(item_ids))))
            .order_by(InventoryItem.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    def lock_items(self, item_ids: Iterable[int]) -> dict[int, InventoryItem]:
        """Lock every given row in one statement, in ascending id order.

        Concurrent multi-row operations then always acquire row locks in the
        same order, so two of them touching the same rows cannot deadlock.
        Later per-row locks inside the transaction are already held.
        """

        item_ids = set(item_ids)
        if not item_ids:
            return {}
        rows = self.gateway.session.execute(self.lock_statement(item_ids)).scalars()
        return {item.id: item for item in rows}

    def create_item(self, values: Mapping[str, Any]) -> InventoryItem:
        self._require_warehouse(values.get("warehouse_id"))
        self._require_unique_product_id(values.get("product_id"))
        return self.items.create(**values)

    def update_item(self, item_id: int, changes: Mapping[str, Any]) -> InventoryItem:
        item = self.items.require(item_id)
        if "warehouse_id" in changes:
            self._require_warehouse(changes["warehouse_id"])
        product_id = changes.get("product_id")
        if product_id is not None and product_id != item.product_id:
            self._require_unique_product_id(product_id)
        return self.items.update(item_id, changes)

    def delete_item(self, item_id: int) -> bool:
        return self.items.delete(item_id)

    @staticmethod
    def is_low_stock(item: InventoryItem) -> bool:
        return is_low_stock(item.quantity, item.min_stock)

    def _require_warehouse(self, warehouse_id: int | None) -> None:
        if warehouse_id is None:
            raise ValidationError("warehouseId: Required")
        self.gateway.warehouses.require(warehouse_id)

    def _require_unique_product_id(self, product_id: str | None) -> None:
        if product_id and self.get_by_product_id(product_id) is not None:
            raise ValidationError(f"productId: {product_id} already exists.")
